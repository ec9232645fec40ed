from __future__ import annotations

import enum

from sqlalchemy import Boolean, Column, Date, DateTime, String
from sqlalchemy.orm import declarative_base

from .utils import utcnow

Base = declarative_base()


class Reason(str, enum.Enum):
    WORK = "work"
    BREAK = "break"
    VACATION = "vacation"
    SICK_LEAVE = "sick leave"


class Location(str, enum.Enum):
    HOME = "home"
    OFFICE = "office"
    # pseudo-location for absences, the timelog doesn't belong anywhere
    ABSENCE = "absence"


class Timelog(Base):
    __tablename__ = "timelogs"

    id = Column(String(36), primary_key=True)
    start = Column(DateTime(timezone=True), nullable=False, index=True)
    stop = Column(DateTime(timezone=True), nullable=True, index=True)
    reason = Column(String(20), nullable=False)
    location = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    modified_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class PublicHoliday(Base):
    __tablename__ = "publicholidays"

    id = Column(String(36), primary_key=True)
    day = Column(Date, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    half_day = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    modified_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Work(Base):
    __tablename__ = "work"

    id = Column(String(36), primary_key=True)
    start = Column(DateTime(timezone=True), nullable=False, index=True)
    stop = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    modified_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
