"""Storage key codec for month buckets.

Changing the layout below invalidates every existing cache.
"""

from __future__ import annotations

import re
from datetime import date

DIRECTORY = "database"
DATABASE = "globe_history"

_MONTH_KEY_RE = re.compile(
    rf"^{DIRECTORY}/{DATABASE}/(?P<year>\d{{4}})-(?P<month>\d{{2}})/trace_full_(?P<icao>[^/]+)\.json$"
)


def month_prefix(month: date) -> str:
    return f"{DIRECTORY}/{DATABASE}/{month.year:04}-{month.month:02}"


def month_key(icao: str, month: date) -> str:
    """Return the key of the bucket holding ``icao``'s positions for ``month``."""

    return f"{month_prefix(month)}/trace_full_{icao}.json"


def parse_month_key(key: str) -> tuple[str, date] | None:
    """Parse a bucket key back into ``(icao, first day of month)``.

    Returns ``None`` for keys that are not month buckets (directory markers,
    day-level objects, unrelated files).
    """

    match = _MONTH_KEY_RE.match(key)
    if match is None:
        return None
    try:
        month = date(int(match.group("year")), int(match.group("month")), 1)
    except ValueError:
        return None
    return match.group("icao"), month


__all__ = ["DATABASE", "DIRECTORY", "month_key", "month_prefix", "parse_month_key"]
