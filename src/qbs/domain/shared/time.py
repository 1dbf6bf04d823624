"""Clock helpers.

All timestamps stored or compared by the auth code are aware UTC
datetimes. SQLite hands back naive values, so anything read from the
database goes through ``as_utc`` before it is compared.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Treat a naive datetime as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def whole_days_since(moment: datetime, now: datetime | None = None) -> int:
    """Full days elapsed since ``moment`` (never negative)."""
    elapsed = (now or utc_now()) - as_utc(moment)
    return max(elapsed.days, 0)
