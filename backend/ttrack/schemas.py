from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .models import Location, Reason
from .utils import as_utc, parse_uuid

NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _serialize_datetime(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    else:
        value = value.astimezone(dt.timezone.utc)
    return value.isoformat()


def _normalize_id(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    normalized = parse_uuid(value)
    if normalized is None:
        raise ValueError("ID must be a UUID")
    if normalized == NIL_UUID:
        return None
    return normalized


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="ID")

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> Optional[str]:
        return _normalize_id(value)


class TimelogRequest(_Record):
    start: dt.datetime = Field(alias="Start")
    stop: Optional[dt.datetime] = Field(default=None, alias="Stop")
    reason: Reason = Field(alias="Reason")
    location: Location = Field(alias="Location")


class TimelogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="ID")
    start: dt.datetime = Field(alias="Start")
    stop: Optional[dt.datetime] = Field(default=None, alias="Stop")
    reason: str = Field(alias="Reason")
    location: str = Field(alias="Location")
    created_at: dt.datetime = Field(alias="CreatedAt")
    modified_at: dt.datetime = Field(alias="ModifiedAt")

    @field_serializer("start", "stop", "created_at", "modified_at", when_used="json")
    def _serialize_timestamps(self, value: Optional[dt.datetime]) -> Optional[str]:
        return _serialize_datetime(value) if value else None


class PublicHolidayRequest(_Record):
    day: dt.date = Field(alias="Day")
    name: str = Field(alias="Name", min_length=1)
    half_day: bool = Field(default=False, alias="HalfDay")

    @field_validator("day", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


class PublicHolidayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="ID")
    day: dt.date = Field(alias="Day")
    name: str = Field(alias="Name")
    half_day: bool = Field(alias="HalfDay")
    created_at: dt.datetime = Field(alias="CreatedAt")
    modified_at: dt.datetime = Field(alias="ModifiedAt")

    @field_serializer("created_at", "modified_at", when_used="json")
    def _serialize_timestamps(self, value: dt.datetime) -> str:
        return _serialize_datetime(value)


class WorkRequest(_Record):
    start: dt.datetime = Field(alias="Start")
    stop: dt.datetime = Field(alias="Stop")

    @model_validator(mode="after")
    def _check_range(self) -> "WorkRequest":
        if as_utc(self.stop) < as_utc(self.start):
            raise ValueError("Stop must not be before Start")
        return self


class WorkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="ID")
    start: dt.datetime = Field(alias="Start")
    stop: dt.datetime = Field(alias="Stop")
    created_at: dt.datetime = Field(alias="CreatedAt")
    modified_at: dt.datetime = Field(alias="ModifiedAt")

    @field_serializer("start", "stop", "created_at", "modified_at", when_used="json")
    def _serialize_timestamps(self, value: dt.datetime) -> str:
        return _serialize_datetime(value)


class ErrorResponse(BaseModel):
    code: str = Field(alias="Code")
    external: str = Field(alias="External")
    internal: str = Field(alias="Internal")
