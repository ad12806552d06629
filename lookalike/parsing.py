"""
lookalike/parsing.py

Low-level text parsing shared by column type detection and value encoding.

Every helper here is forgiving: bad input yields None (or a fallback chosen by
the caller) instead of raising, because a single malformed cell must never
abort a scoring run.
"""

from __future__ import annotations

import math
import re
import warnings
from typing import Optional

import pandas as pd


MS_PER_DAY = 86_400_000

# Leading numeric prefix, e.g. "12 miles" -> 12.0, "3.5e2x" -> 350.0
_LEADING_FLOAT = re.compile(r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),           # 2024-01-31
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),     # 1/31/24, 01/31/2024
    re.compile(r"^\d{1,2}-\d{1,2}-\d{2,4}$"),     # 1-31-2024
    re.compile(r"^\w+ \d{1,2},? \d{4}$", re.ASCII),  # January 31, 2024
    re.compile(r"^\d{1,2} \w+ \d{4}$", re.ASCII),    # 31 January 2024
)


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(x + 0.5))


def parse_leading_float(value: str) -> Optional[float]:
    """
    Parse the numeric prefix of a string.

    Mirrors how spreadsheet exports are usually read: "42", " 3.5 ", "10 mi"
    all yield a number; "abc" and "" yield None.
    """
    match = _LEADING_FLOAT.match(value.strip())
    if not match:
        return None
    return float(match.group(0).replace("Infinity", "inf"))


def parse_timestamp_ms(value: str) -> Optional[float]:
    """
    Parse a free-form date string to epoch milliseconds (UTC).

    Naive dates are read as UTC midnight. Returns None when pandas cannot
    make sense of the text.
    """
    text = value.strip()
    if not text:
        return None
    with warnings.catch_warnings():
        # "could not infer format" chatter for one-off strings
        warnings.simplefilter("ignore", UserWarning)
        try:
            ts = pd.to_datetime(text, errors="coerce", utc=True)
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(ts):
        return None
    return ts.value / 1_000_000


def looks_like_date(value: str) -> bool:
    text = value.strip()
    if any(p.match(text) for p in DATE_PATTERNS):
        return True
    return len(text) > 6 and parse_timestamp_ms(text) is not None


def now_ms(now: Optional[pd.Timestamp] = None) -> float:
    """Epoch milliseconds for `now` (defaults to the current UTC time)."""
    if now is None:
        now = pd.Timestamp.now(tz="UTC")
    else:
        now = pd.Timestamp(now)
        if now.tzinfo is None:
            now = now.tz_localize("UTC")
    return now.value / 1_000_000
