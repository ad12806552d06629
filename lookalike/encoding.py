"""
lookalike/encoding.py

Turns one raw cell into one number, given the column's type.

  empty              -> 0 (days_since: the "very old visit" sentinel, 999)
  days_since         -> whole days between the date and now, never negative
  date               -> epoch milliseconds (0 if unparsable)
  everything else    -> number prefix, then yes/no, gender and parental
                        vocabularies, then a stable 32-bit string hash
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from lookalike.column_types import ColumnType
from lookalike.parsing import (
    MS_PER_DAY,
    now_ms,
    parse_leading_float,
    parse_timestamp_ms,
    round_half_up,
)


MISSING_DAYS_SINCE = 999.0

TRUE_WORDS = frozenset(["yes", "true", "1", "y", "active"])
FALSE_WORDS = frozenset(["no", "false", "0", "n", "inactive"])
MALE_WORDS = frozenset(["male", "m"])
FEMALE_WORDS = frozenset(["female", "f"])
PARENT_WORDS = frozenset(["parent", "yes"])
NON_PARENT_WORDS = frozenset(["non-parent", "non parent", "nonparent", "no", "none", "childless"])


def _to_int32(x: int) -> int:
    x &= 0xFFFFFFFF
    return x - 0x100000000 if x >= 0x80000000 else x


def string_hash(value: str) -> int:
    """
    Polynomial rolling hash (h * 31 + unit) with 32-bit signed wraparound,
    computed over UTF-16 code units so results are stable across platforms.

    Only reached for tokens no vocabulary recognizes.
    """
    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return h


def days_since(value: str, now: Optional[pd.Timestamp] = None,
               missing: float = MISSING_DAYS_SINCE) -> float:
    ts = parse_timestamp_ms(value or "")
    if ts is None:
        return missing
    return float(max(0, round_half_up((now_ms(now) - ts) / MS_PER_DAY)))


def encode_value(
    value: Optional[str],
    column_type: ColumnType = ColumnType.NUMERIC,
    now: Optional[pd.Timestamp] = None,
    missing_days_since: float = MISSING_DAYS_SINCE,
) -> float:
    text = (value or "").strip()

    if column_type is ColumnType.DAYS_SINCE:
        return days_since(text, now=now, missing=missing_days_since)

    if not text:
        return 0.0

    if column_type is ColumnType.DATE:
        ts = parse_timestamp_ms(text)
        return ts if ts is not None else 0.0

    num = parse_leading_float(text)
    if num is not None:
        return num

    lower = text.lower()
    if lower in TRUE_WORDS:
        return 1.0
    if lower in FALSE_WORDS:
        return 0.0
    if lower in MALE_WORDS:
        return 1.0
    if lower in FEMALE_WORDS:
        return 0.0
    if lower in PARENT_WORDS:
        return 1.0
    if lower in NON_PARENT_WORDS:
        return 0.0

    # binary columns are typed case-insensitively, so their hashes must be too
    return float(string_hash(lower if column_type.is_binary else text))
