"""Cache freshness policy.

A snapshot is fresh while it is no older than a number of calendar
months. Month subtraction keeps the day of month and lets it overflow
into the next month when the target month is shorter (31 May minus 3
months is 3 March, not 28 February).
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone

from pgs_stats.config import DEFAULT_MAX_AGE_MONTHS


def subtract_months(moment: datetime, months: int) -> datetime:
    """Move moment back by calendar months, overflowing short months."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1

    days_in_month = calendar.monthrange(year, month)[1]
    overflow = max(0, moment.day - days_in_month)
    anchored = moment.replace(year=year, month=month, day=min(moment.day, days_in_month))
    return anchored + timedelta(days=overflow)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_fresh(
    saved_at: str | None,
    max_age_months: int = DEFAULT_MAX_AGE_MONTHS,
    now: datetime | None = None,
) -> bool:
    """Whether a snapshot saved at saved_at is still usable.

    Args:
        saved_at: ISO-8601 save timestamp.
        max_age_months: Maximum age in calendar months (inclusive).
        now: Reference time; defaults to the current UTC time.

    Returns:
        True iff saved_at >= now - max_age_months. Missing or
        unparseable timestamps are never fresh.
    """
    saved = parse_timestamp(saved_at)
    if saved is None:
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return saved >= subtract_months(now, max_age_months)
