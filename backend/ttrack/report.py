from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from .models import Reason
from .utils import UTC, calendar_day, day_key
from .workdays import is_workday

logger = logging.getLogger(__name__)

ONE_DAY = dt.timedelta(days=1)

WARNING_NO_STOP_TIME = "no stop time"
WARNING_TOO_MANY_REASONS = "too many reasons"


@dataclass
class DayBucket:
    """Reasons and work location collected for a single calendar day."""

    reasons: List[str] = field(default_factory=list)
    location: Optional[str] = None

    def add_reason(self, reason: str) -> None:
        if reason not in self.reasons:
            self.reasons.append(reason)


def _tag(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class Report(BaseModel):
    """Attendance figures for one calendar year.

    A report is created per request with :func:`new_report`, filled once by
    :meth:`calculate` and then serialized. The holiday and timelog collections
    passed to :meth:`calculate` are only read; they must not be changed by
    another thread while the calculation runs.
    """

    model_config = ConfigDict(populate_by_name=True)

    year: int = Field(alias="Year")
    days: int = Field(default=0, alias="Days")
    work_days: int = Field(default=0, alias="WorkDays")
    days_on_weekend: int = Field(default=0, alias="DaysOnWeekend")
    public_holidays: int = Field(default=0, alias="PublicHolidays")
    public_holidays_on_workdays: int = Field(default=0, alias="PublicHolidaysOnWorkdays")
    first_day: dt.datetime = Field(alias="FirstDay")
    last_day: dt.datetime = Field(alias="LastDay")
    work_days_per_reason: Dict[str, int] = Field(default_factory=dict, alias="WorkDaysPerReason")
    work_days_per_location: Dict[str, int] = Field(default_factory=dict, alias="WorksDaysPerLocation")
    warnings: Dict[str, List[str]] = Field(default_factory=dict, alias="Warnings")

    def calculate(self, public_holidays: Iterable[Any], timelogs: Iterable[Any]) -> "Report":
        """Fill the report from the given public holidays and timelogs.

        Holidays are counted as given, whatever year they fall in. Timelogs
        without a stop time and days logged with more than one reason end up
        in ``warnings`` instead of failing the calculation.
        """
        self._count_public_holidays(public_holidays)
        self._count_days()
        buckets = self._group_timelogs(timelogs)
        self._warn_about_reasons(buckets)
        self._tally(buckets)
        logger.debug(
            "report %s calculated: %s days, %s work days, %s warnings",
            self.year,
            self.days,
            self.work_days,
            len(self.warnings),
        )
        return self

    def _count_public_holidays(self, public_holidays: Iterable[Any]) -> None:
        # records are counted, a date only takes away one workday
        seen: Set[dt.date] = set()
        for holiday in public_holidays:
            self.public_holidays += 1
            day = calendar_day(holiday.day)
            if is_workday(day) and day not in seen:
                self.public_holidays_on_workdays += 1
            seen.add(day)

    def _count_days(self) -> None:
        day = self.first_day
        while day < self.last_day:
            self.days += 1
            if is_workday(day):
                self.work_days += 1
            else:
                self.days_on_weekend += 1
            if self.last_day - day < ONE_DAY:
                # last day reached, stepping on could leave the datetime range
                break
            day += ONE_DAY
        # holidays on workdays leave the weekend count untouched
        self.work_days -= self.public_holidays_on_workdays

    def _group_timelogs(self, timelogs: Iterable[Any]) -> Dict[str, DayBucket]:
        buckets: Dict[str, DayBucket] = {}
        for timelog in timelogs:
            key = day_key(timelog.start)
            if timelog.stop is None:
                self._warn(key, WARNING_NO_STOP_TIME)
                continue
            bucket = buckets.setdefault(key, DayBucket())
            reason = _tag(timelog.reason)
            if reason == Reason.WORK.value and bucket.location is None:
                bucket.location = _tag(timelog.location)
            if reason != Reason.BREAK.value:
                bucket.add_reason(reason)
        return buckets

    def _warn_about_reasons(self, buckets: Dict[str, DayBucket]) -> None:
        for key, bucket in buckets.items():
            if len(bucket.reasons) > 1:
                joined = ", ".join(bucket.reasons)
                self._warn(key, f'{WARNING_TOO_MANY_REASONS}: "{joined}"')

    def _tally(self, buckets: Dict[str, DayBucket]) -> None:
        for bucket in buckets.values():
            for reason in bucket.reasons:
                self.work_days_per_reason[reason] = self.work_days_per_reason.get(reason, 0) + 1
            if bucket.location is not None:
                self.work_days_per_location[bucket.location] = (
                    self.work_days_per_location.get(bucket.location, 0) + 1
                )

    def _warn(self, key: str, message: str) -> None:
        self.warnings.setdefault(key, []).append(message)


def new_report(year: int) -> Report:
    """Return an empty report spanning Jan 1 00:00:00 to Dec 31 23:59:59 UTC."""
    first_day = dt.datetime(year, 1, 1, tzinfo=UTC)
    last_day = dt.datetime(year, 12, 31, 23, 59, 59, tzinfo=UTC)
    return Report(year=year, first_day=first_day, last_day=last_day)
