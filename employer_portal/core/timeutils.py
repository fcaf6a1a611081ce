"""Timezone helpers shared by services."""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# Calendar dates (closing dates, publication) follow the Dutch business day.
BUSINESS_TIMEZONE = "Europe/Amsterdam"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today(tz: str = BUSINESS_TIMEZONE, now: datetime | None = None) -> date:
    """Calendar date in ``tz`` at ``now`` (defaults to the current instant)."""
    moment = ensure_aware(now) or utcnow()
    return moment.astimezone(ZoneInfo(tz)).date()


def ensure_aware(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
