from datetime import date, datetime, timedelta
from typing import Optional


def start_of_day(d: date) -> datetime:
    # Mongo has no date-only type; days are stored as naive midnight datetimes
    return datetime(d.year, d.month, d.day)


def day_range_query(start: Optional[date], end: Optional[date]) -> dict:
    """Build a `date` filter covering whole days, both bounds inclusive."""
    q: dict = {}
    if start is not None:
        q["$gte"] = start_of_day(start)
    if end is not None:
        q["$lt"] = start_of_day(end) + timedelta(days=1)
    return q


def as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value
