"""Unit conversions and date helpers shared by the feed views."""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Union

KM_PER_AU = 149597870.7
LUNAR_PER_AU = 389.17
KM_PER_LUNAR = 384400.0

DateLike = Union[date, str]


def au_to_km(au: float) -> float:
    return au * KM_PER_AU


def au_to_lunar(au: float) -> float:
    return au * LUNAR_PER_AU


def km_to_lunar(km: float) -> float:
    return km / KM_PER_LUNAR


def kps_to_kph(velocity: float) -> float:
    return velocity * 3600.0


def today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def format_date(value: DateLike) -> str:
    if isinstance(value, str):
        return value
    return value.strftime("%Y-%m-%d")


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` or the JPL ``YYYY-Mon-DD hh:mm`` calendar form."""
    if not value:
        return None
    for fmt in ("%Y-%m-%d", "%Y-%b-%d %H:%M", "%Y-%b-%d"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


def date_offset(days: int, start: Optional[DateLike] = None) -> str:
    base = as_date(start) if start is not None else today()
    return format_date(base + timedelta(days=days))


def date_range(start: DateLike, end: DateLike) -> List[str]:
    """Every ISO date from ``start`` to ``end``, both inclusive."""
    first, last = as_date(start), as_date(end)
    return [format_date(first + timedelta(days=i)) for i in range((last - first).days + 1)]
