"""Timezone-aware date helpers for event dates."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Europe/Madrid')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def to_date_str(value) -> str:
    """
    Normalize a calendar day to 'YYYY-MM-DD'.

    Accepts date, datetime, or ISO strings with an optional time part
    ('2025-06-01T18:00'); the time of day is dropped.

    Raises:
        ValueError: If the value is empty or not a date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not value:
        raise ValueError('date is required')
    text = str(value).strip()[:10]
    return datetime.strptime(text, '%Y-%m-%d').date().isoformat()
