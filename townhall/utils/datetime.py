"""Timestamp helpers shared by the notification store and its documents.

Timestamps travel through the domain as aware datetimes in the application
timezone. The store keeps them naive (SQLite drops offsets), so values are
converted with :func:`to_storage` on the way in and :func:`from_storage` on
the way out.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from townhall.config import get_settings

logger = logging.getLogger(__name__)

_UTC_NAMES: Final[frozenset[str]] = frozenset({"", "utc", "z", "gmt"})
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def parse_timezone(name: str | None) -> tzinfo:
    """Return the timezone named by ``name``.

    Accepts IANA names and fixed offsets such as ``UTC-5``, ``GMT+05:30`` or
    ``+02:00``. Unknown names resolve to UTC.
    """

    cleaned = (name or "").strip()
    if cleaned.lower() in _UTC_NAMES:
        return timezone.utc

    match = _OFFSET_PATTERN.match(cleaned)
    if match:
        offset = timedelta(
            hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
        )
        return timezone(-offset if match.group("sign") == "-" else offset)

    try:
        return ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; falling back to UTC", cleaned)
        return timezone.utc


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    return parse_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def from_storage(value: datetime | None) -> datetime | None:
    """Attach (or convert to) the application timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def to_storage(value: datetime | None) -> datetime | None:
    """Return ``value`` as a naive datetime in the application timezone."""

    localized = from_storage(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def isoformat_or_none(value: datetime | None) -> str | None:
    localized = from_storage(value)
    return localized.isoformat() if localized is not None else None


__all__ = [
    "from_storage",
    "get_app_timezone",
    "isoformat_or_none",
    "now_in_app_timezone",
    "parse_timezone",
    "to_storage",
]
