"""
Date and timezone utilities.

Trades are entered as a calendar date and a local time of day.  This
module turns those strings into timezone‑aware timestamps and formats
timestamps into the short labels used by the equity curve and the
monthly breakdown.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd


def to_timezone(ts: pd.Timestamp, tz_name: str) -> pd.Timestamp:
    """Convert a `pandas.Timestamp` to the specified timezone.

    If the timestamp is naive, it is assumed to be in UTC before
    conversion.  If it already has a timezone, it will be converted.
    """
    if not isinstance(ts, pd.Timestamp):
        ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(tz_name)


def combine_date_time(date: str, time: str, tz_name: str) -> pd.Timestamp:
    """Combine a `YYYY-MM-DD` date and `HH:MM[:SS]` time into a timestamp.

    The wall-clock time is interpreted in `tz_name`.  Times falling into
    a DST gap are shifted forward; ambiguous times resolve to standard
    time.

    Raises
    ------
    ValueError
        If the date or time cannot be parsed.
    """
    naive = pd.Timestamp(f"{date.strip()} {time.strip()}")
    if naive is pd.NaT:
        raise ValueError(f"Invalid trade date/time: {date!r} {time!r}")
    return naive.tz_localize(tz_name, ambiguous=False, nonexistent="shift_forward")


def is_canonical_date(value: str) -> bool:
    """Return `True` if `value` is a real calendar date written as ``YYYY-MM-DD``.

    Unpadded forms such as ``2024-3-5`` are rejected: trades are looked
    up by exact date string.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return parsed.strftime("%Y-%m-%d") == value


def is_canonical_time(value: str) -> bool:
    """Return `True` if `value` is a valid ``HH:MM`` or ``HH:MM:SS`` time."""
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.strftime(fmt) == value:
            return True
    return False


def utc_now() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


def short_day_label(ts: pd.Timestamp) -> str:
    """Format a timestamp as ``"Jan 5"``."""
    return f"{ts.strftime('%b')} {ts.day}"


def month_label(year: int, month: int) -> str:
    """Format a calendar month as ``"Jan 2024"``."""
    return pd.Timestamp(year=year, month=month, day=1).strftime("%b %Y")
