"""Date defaults for proxy requests.

All dates travel as ISO ``YYYY-MM-DD`` strings. "Today" is the UTC calendar
date so that defaults do not shift with the host timezone.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

DEFAULT_LOOKBACK_DAYS = 30

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def parse_iso_date(value: date | str) -> date:
    """Return *value* as a :class:`date`.

    Raises
    ------
    ValueError
        If a string is not a real ``YYYY-MM-DD`` calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if not ISO_DATE_RE.match(text):
        raise ValueError(f"invalid date format: {text!r} (expected YYYY-MM-DD)")
    return date.fromisoformat(text)


def iso_date(value: date | str) -> str:
    """Return *value* as ``YYYY-MM-DD``; raises ``ValueError`` on malformed strings."""
    return parse_iso_date(value).isoformat()


def default_range(
    from_: date | str | None = None,
    to: date | str | None = None,
    today: date | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> tuple[str, str]:
    """Fill in a missing ``from``/``to`` pair.

    ``to`` defaults to today and ``from`` to *lookback_days* before ``to``.
    """
    end = parse_iso_date(to) if to else (today or today_utc())
    start = parse_iso_date(from_) if from_ else end - timedelta(days=lookback_days)
    return start.isoformat(), end.isoformat()


def default_daily_date(value: date | str | None = None, today: date | None = None) -> str:
    """Return *value* or yesterday, when the session has surely closed."""
    if value:
        return iso_date(value)
    today = today or today_utc()
    return (today - timedelta(days=1)).isoformat()
