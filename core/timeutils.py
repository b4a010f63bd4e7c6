"""
Timezone-aware clock helpers.

All timestamps handled by the account engine are aware datetimes in UTC.
Calendar-based rules (month arithmetic, "today") are expressed here so the
policy and ledger modules stay free of date edge cases.
"""

import calendar
from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_months(value: datetime, months: int) -> datetime:
    """
    Add calendar months, keeping the day of month where it exists.

    Days past the end of the target month clamp to its last day,
    so Jan 31 + 1 month is Feb 28 (Feb 29 in leap years).
    Time of day and tzinfo are preserved.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


@lru_cache
def get_zone(name: str) -> ZoneInfo:
    """Cached ZoneInfo lookup."""
    return ZoneInfo(name)


def local_date(value: datetime, zone_name: str):
    """Calendar date of an instant as seen in the given time zone."""
    return ensure_aware(value).astimezone(get_zone(zone_name)).date()
