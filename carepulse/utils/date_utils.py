# carepulse/utils/date_utils.py

from datetime import datetime, date, time
from typing import Dict, Union


def to_datetime(value: Union[str, date, datetime]) -> datetime:
    """Coerce ISO strings and dates to datetime; BSON has no plain date type"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def time_slot(value: Union[str, datetime]) -> str:
    """Zero-padded HH:MM of the scheduled time, e.g. '09:05'"""
    scheduled = to_datetime(value)
    return f"{scheduled.hour:02d}:{scheduled.minute:02d}"


def _twelve_hour(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_date_time(value: Union[str, datetime]) -> Dict[str, str]:
    """Display strings used by the dashboard table"""
    value = to_datetime(value)
    month = value.strftime("%b")
    weekday = value.strftime("%a")
    clock = _twelve_hour(value)

    return {
        "date_time": f"{month} {value.day}, {value.year}, {clock}",
        "date_day": f"{weekday}, {value.month:02d}/{value.day:02d}/{value.year}",
        "date_only": f"{month} {value.day}, {value.year}",
        "time_only": clock,
    }
