"""
General helper utilities
"""
import math
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from backend.models.leaf_collection import Shift

MONTH_ABBR = {
    1: "Jan", 2: "Feb", 3: "Mar", 4: "Apr", 5: "May", 6: "Jun",
    7: "Jul", 8: "Aug", 9: "Sep", 10: "Oct", 11: "Nov", 12: "Dec",
}
MONTH_NUMBER = {abbr: num for num, abbr in MONTH_ABBR.items()}


def shift_for(moment: datetime) -> Shift:
    """Before noon is the morning shift"""
    return Shift.MORNING if moment.hour < 12 else Shift.EVENING


def month_label_for(day: date) -> str:
    """date(2025, 1, 15) -> 'Jan-2025'"""
    return f"{MONTH_ABBR[day.month]}-{day.year}"


def parse_month_label(label: Optional[str]) -> Optional[tuple[int, int]]:
    """'Jan-2025' -> (1, 2025); None when the label can't be read"""
    if not label:
        return None
    parts = str(label).strip().split("-")
    if len(parts) != 2:
        return None
    abbr, year = parts
    month = MONTH_NUMBER.get(abbr)
    if month is None or not year.isdigit():
        return None
    return month, int(year)


def to_float(value: Any) -> float:
    """Lenient numeric read: blanks, junk, NaN and infinities count as zero"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    return int(to_float(value))


def day_of_month_or(value: Any, fallback: int) -> int:
    """Calendar day 1-31 read leniently; anything else gives the fallback"""
    day = to_int(value)
    return day if 1 <= day <= 31 else fallback


def display_date(moment: Optional[datetime]) -> Optional[str]:
    return moment.strftime("%d/%m/%Y") if moment else None


def display_time(moment: Optional[datetime]) -> Optional[str]:
    return moment.strftime("%I:%M %p") if moment else None


def first_present(payload: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """First non-blank value among keys, or None"""
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def envelope(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """Uniform success response body"""
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    body.update(extra)
    return body
