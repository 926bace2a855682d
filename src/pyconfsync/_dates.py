"""Date parsing and time-zone helpers.

All helpers are pure and return timezone-aware UTC datetimes (or
``None`` for values that cannot be parsed), so the sync engine never
has to deal with naive timestamps.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or datetime (``Z`` suffix accepted)."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_server_date(value: str | None) -> datetime | None:
    """Parse a ``Last-Modified`` header value.

    Accepts the RFC 1123 format servers send
    (``Wed, 01 Jan 2020 00:00:00 GMT``) and falls back to ISO-8601.
    Returns ``None`` when the value is absent or unparseable.
    """
    if value is None or not value.strip():
        return None
    try:
        return _as_utc(parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError):
        pass
    parsed = parse_iso_datetime(value)
    if parsed is None:
        _logger.debug("Unparseable last-modified value: %r", value)
    return parsed


def parse_schedule_date(value: str | None) -> datetime | None:
    """Parse an event ``startTime``/``endTime`` value."""
    return parse_iso_datetime(value)


def to_local_time(value: datetime, tz_name: str | None) -> datetime:
    """Convert *value* into the conference time zone.

    Unknown or empty zone names fall back to UTC.
    """
    if not tz_name:
        return _as_utc(value)
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.debug("Unknown time zone %r, using UTC", tz_name)
        return _as_utc(value)
    return _as_utc(value).astimezone(zone)
