from __future__ import annotations

import datetime as dt
from typing import Union


def is_workday(day: Union[dt.date, dt.datetime]) -> bool:
    """Return True for Monday to Friday."""
    return day.isoweekday() <= 5
