"""Time helpers. ``utc_now`` is the only place the wall clock is read."""

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: object) -> datetime | None:
    """Coerce ISO strings, dates and datetimes to aware datetimes.

    Blank or unparseable input yields ``None`` instead of raising, since
    stored rows frequently carry empty strings or legacy formats.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(value: datetime) -> datetime:
    """Midnight of the Monday of ``value``'s calendar week."""
    day = start_of_day(value)
    return day - timedelta(days=day.weekday())


def whole_days_between(later: datetime, earlier: datetime) -> int:
    """Floor of the elapsed days from ``earlier`` to ``later``."""
    return (later - earlier) // timedelta(days=1)
