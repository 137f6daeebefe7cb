"""Datetime helpers for backend timestamps and feed display."""
from datetime import datetime, timezone

MONTH_ABBREVIATIONS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def parse_backend_dt(dt_str: str) -> datetime:
    """
    Parse an ISO-8601 timestamp as returned by the backend.

    Accepts a trailing ``Z`` or an explicit offset. Naive values are assumed UTC.

    :param dt_str: Timestamp string, e.g. ``2024-03-15T10:30:45.123456+00:00``
    :return: Timezone-aware datetime
    :raises ValueError: If the string is not a valid timestamp
    """
    if not dt_str:
        raise ValueError("Empty timestamp")
    normalized = dt_str[:-1] + '+00:00' if dt_str.endswith('Z') else dt_str
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit if count == 1 else unit + 's'} ago"


def format_relative_time(value: datetime | str, now: datetime | None = None) -> str:
    """
    Format a timestamp relative to now, e.g. "2 hours ago", "yesterday".

    Timestamps more than a year old fall back to a short date, with the year
    only when it differs from the current one.

    :param value: Datetime or backend timestamp string
    :param now: Reference time (defaults to the current UTC time)
    :return: Human-readable relative time
    """
    then = parse_backend_dt(value) if isinstance(value, str) else value
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    now = now or get_utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - then).total_seconds())
    if seconds < 60:
        # Future timestamps (clock skew) also land here
        return 'just now'

    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if minutes < 60:
        return _plural(minutes, 'minute')
    if hours < 24:
        return _plural(hours, 'hour')
    if days == 1:
        return 'yesterday'
    if days < 7:
        return _plural(days, 'day')
    if days // 7 < 4:
        return _plural(days // 7, 'week')
    if days // 30 < 12:
        return _plural(max(days // 30, 1), 'month')
    if days // 365 <= 1:
        return '1 year ago'

    label = f"{MONTH_ABBREVIATIONS[then.month - 1]} {then.day}"
    if then.year == now.year:
        return label
    return f"{label}, {then.year}"
