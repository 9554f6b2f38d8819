"""
UTC clock and HTTP-date helpers (stdlib-only).

``utc_now`` is the single clock used for ``State.retrieved`` so tests can
patch one place.
"""

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def parse_http_date(value: str | None) -> datetime | None:
    """
    Parse an RFC 7231 HTTP-date (``Expires``, ``Last-Modified``).

    Returns a timezone-aware UTC datetime, or None when the value is missing
    or not a date (``Expires: 0`` is a common example).
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def to_http_date(value: datetime) -> str:
    """Format a datetime as an HTTP-date (used by tests and fake transports)."""
    return value.astimezone(UTC).strftime("%a, %d %b %Y %H:%M:%S GMT")
