from __future__ import annotations

import datetime as dt
import logging
import uuid
from typing import Dict, Iterable, List, Optional

from fastapi import status
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import ApiError, not_found
from .models import PublicHoliday, Timelog, Work
from .report import Report, new_report
from .schemas import PublicHolidayRequest, TimelogRequest, WorkRequest
from .utils import as_utc, as_utc_optional, day_start, year_bounds

logger = logging.getLogger(__name__)

ONE_DAY = dt.timedelta(days=1)


def _new_id() -> str:
    return str(uuid.uuid4())


def _load_for_save(db: Session, model, record_id: Optional[str], entity: str):
    if record_id is None:
        return model(id=_new_id()), "created"
    record = db.get(model, record_id)
    if record is None:
        raise not_found(entity, record_id, code="SAVE")
    return record, "updated"


# timelogs


def get_timelog(db: Session, timelog_id: str) -> Timelog:
    timelog = db.get(Timelog, timelog_id)
    if timelog is None:
        raise not_found("timelog", timelog_id)
    return timelog


def save_timelog(db: Session, payload: TimelogRequest) -> Timelog:
    timelog, action = _load_for_save(db, Timelog, payload.id, "timelog")
    timelog.start = as_utc(payload.start)
    timelog.stop = as_utc_optional(payload.stop)
    timelog.reason = payload.reason.value
    timelog.location = payload.location.value
    db.add(timelog)
    db.commit()
    db.refresh(timelog)
    logger.info("timelog %s %s", timelog.id, action)
    return timelog


def delete_timelog(db: Session, timelog_id: str) -> None:
    timelog = db.get(Timelog, timelog_id)
    if timelog is None:
        logger.info("timelog %s already gone", timelog_id)
        return
    db.delete(timelog)
    db.commit()
    logger.info("timelog %s deleted", timelog_id)


def list_timelogs_in_range(db: Session, start_day: dt.date, stop_day: dt.date) -> List[Timelog]:
    """Timelogs starting on or after ``start_day`` which are open or stopped before ``stop_day`` ends."""
    range_start = day_start(start_day)
    range_end = day_start(stop_day) + ONE_DAY
    return (
        db.query(Timelog)
        .filter(
            and_(
                Timelog.start >= range_start,
                or_(Timelog.stop < range_end, Timelog.stop.is_(None)),
            )
        )
        .order_by(Timelog.start.asc())
        .all()
    )


def list_timelogs_for_year(db: Session, year: int) -> List[Timelog]:
    first, last = year_bounds(year)
    return (
        db.query(Timelog)
        .filter(and_(Timelog.start >= first, Timelog.start <= last))
        .order_by(Timelog.start.asc())
        .all()
    )


def unique_years(db: Session) -> List[int]:
    """Distinct years any timelog starts or stops in, ascending."""
    years = set()
    for start, stop in db.query(Timelog.start, Timelog.stop).all():
        years.add(as_utc(start).year)
        if stop is not None:
            years.add(as_utc(stop).year)
    return sorted(years)


# public holidays


def _apply_public_holiday(db: Session, payload: PublicHolidayRequest) -> PublicHoliday:
    holiday, action = _load_for_save(db, PublicHoliday, payload.id, "public holiday")
    holiday.day = payload.day
    holiday.name = payload.name
    holiday.half_day = payload.half_day
    db.add(holiday)
    db.flush()
    logger.info("public holiday %s (%s) %s", holiday.id, holiday.day, action)
    return holiday


def save_public_holiday(db: Session, payload: PublicHolidayRequest) -> PublicHoliday:
    holiday = _apply_public_holiday(db, payload)
    db.commit()
    db.refresh(holiday)
    return holiday


def save_public_holidays(db: Session, payloads: Iterable[PublicHolidayRequest]) -> Dict[int, List[PublicHoliday]]:
    """Save all holidays in one transaction, keyed by the year of the first one."""
    saved = [_apply_public_holiday(db, payload) for payload in payloads]
    db.commit()
    if not saved:
        return {}
    for holiday in saved:
        db.refresh(holiday)
    return {saved[0].day.year: saved}


def delete_public_holiday(db: Session, holiday_id: str) -> None:
    holiday = db.get(PublicHoliday, holiday_id)
    if holiday is None:
        logger.info("public holiday %s already gone", holiday_id)
        return
    db.delete(holiday)
    db.commit()
    logger.info("public holiday %s deleted", holiday_id)


def list_public_holidays_for_year(db: Session, year: int) -> List[PublicHoliday]:
    return (
        db.query(PublicHoliday)
        .filter(and_(PublicHoliday.day >= dt.date(year, 1, 1), PublicHoliday.day <= dt.date(year, 12, 31)))
        .order_by(PublicHoliday.day.asc())
        .all()
    )


def public_holidays_by_year(db: Session, today: Optional[dt.date] = None) -> Dict[int, List[PublicHoliday]]:
    """Group all holidays by year.

    Every year covered by a timelog gets an entry, even without holidays, so
    clients can offer to maintain it. When the latest timelog year is the
    current one, the following year is offered as well.
    """
    grouped: Dict[int, List[PublicHoliday]] = {}
    for holiday in db.query(PublicHoliday).order_by(PublicHoliday.day.asc()).all():
        grouped.setdefault(holiday.day.year, []).append(holiday)

    years = unique_years(db)
    for year in years:
        grouped.setdefault(year, [])

    current_year = (today or dt.date.today()).year
    if years and years[-1] == current_year:
        grouped.setdefault(current_year + 1, [])

    return dict(sorted(grouped.items()))


# work


def get_work(db: Session, work_id: str) -> Work:
    work = db.get(Work, work_id)
    if work is None:
        raise not_found("work", work_id)
    return work


def save_work(db: Session, payload: WorkRequest) -> Work:
    work, action = _load_for_save(db, Work, payload.id, "work")
    work.start = as_utc(payload.start)
    work.stop = as_utc(payload.stop)
    db.add(work)
    db.commit()
    db.refresh(work)
    logger.info("work %s %s", work.id, action)
    return work


def delete_work(db: Session, work_id: str) -> None:
    work = db.get(Work, work_id)
    if work is None:
        logger.info("work %s already gone", work_id)
        return
    db.delete(work)
    db.commit()
    logger.info("work %s deleted", work_id)


# reports


def build_report(db: Session, year: int) -> Report:
    """Load holidays and timelogs of ``year`` and calculate its report."""
    try:
        holidays = list_public_holidays_for_year(db, year)
    except SQLAlchemyError as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "RPT-PHL",
            "failed to calculate report",
            f"failed to load public holidays: {exc}",
        ) from exc
    try:
        timelogs = list_timelogs_for_year(db, year)
    except SQLAlchemyError as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "RPT-TL",
            "failed to calculate report",
            f"failed to load timelogs: {exc}",
        ) from exc
    return new_report(year).calculate(holidays, timelogs)
