"""
lookalike/column_types.py

Column type detection.

Each shared column gets exactly one ColumnType for the whole run, decided from
its name plus the non-empty values seen across members AND contacts. Rules are
checked in priority order; the first match wins:

  1. binary_gender    name has gender/sex, exactly 2 distinct values
  2. binary_parental  name has parent/children/kids, exactly 2 distinct values
  3. days_since/date  > threshold of values look like dates
  4. age              name is "age" or has _age / age_
  5. distance         name has distance / dist_ / _mi / miles
  6. boolean          > threshold of values are yes/no style words
  7. numeric          > threshold of values start with a number
  8. categorical      everything else (including columns with no values)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from lookalike.parsing import looks_like_date, parse_leading_float


logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    DAYS_SINCE = "days_since"
    DATE = "date"
    AGE = "age"
    DISTANCE = "distance"
    BOOLEAN = "boolean"
    BINARY_GENDER = "binary_gender"
    BINARY_PARENTAL = "binary_parental"
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"

    @property
    def is_binary(self) -> bool:
        return self in (ColumnType.BINARY_GENDER, ColumnType.BINARY_PARENTAL)

    @property
    def is_single_feature(self) -> bool:
        """Everything except categorical is encoded as one numeric feature."""
        return self is not ColumnType.CATEGORICAL


BOOLEAN_WORDS = frozenset(["yes", "no", "true", "false", "1", "0", "y", "n", "active", "inactive"])

_GENDER_HINTS = ("gender", "sex")
_PARENTAL_HINTS = ("parent", "parental", "children", "kids")
_RECENCY_HINTS = ("visit", "last", "recent", "activity")
_DISTANCE_HINTS = ("distance", "dist_", "_mi", "miles")


@dataclass(frozen=True)
class ColumnSpec:
    """
    Typed description of one input column.

    `categories` is only filled for categorical columns: the one-hot
    vocabulary in first-seen order, already truncated to the category cap.
    """
    name: str
    column_type: ColumnType
    categories: Tuple[str, ...] = field(default=())

    @property
    def feature_names(self) -> List[str]:
        if self.column_type is ColumnType.CATEGORICAL:
            return [f"{self.name}::{value}" for value in self.categories]
        return [self.name]


def _distinct_count(values: Sequence[str]) -> int:
    return len({v.strip().lower() for v in values})


def _share(values: Sequence[str], predicate) -> float:
    if not values:
        return 0.0
    return sum(1 for v in values if predicate(v)) / len(values)


def detect_column_type(name: str, values: Sequence[str], threshold: float = 0.7) -> ColumnType:
    """
    Classify a column from its name and its non-empty values.

    Parameters
    ----------
    name : str
        Column header.
    values : Sequence[str]
        Non-empty values from both datasets (empty strings are ignored anyway).
    threshold : float
        Share of values that must agree for the date/boolean/numeric rules.
        The comparison is strict (> threshold).
    """
    lower = name.lower()
    values = [v for v in values if v and v.strip()]

    if any(h in lower for h in _GENDER_HINTS) and _distinct_count(values) == 2:
        return ColumnType.BINARY_GENDER

    if any(h in lower for h in _PARENTAL_HINTS) and _distinct_count(values) == 2:
        return ColumnType.BINARY_PARENTAL

    if values and _share(values, looks_like_date) > threshold:
        if any(h in lower for h in _RECENCY_HINTS):
            return ColumnType.DAYS_SINCE
        return ColumnType.DATE

    if lower == "age" or "_age" in lower or "age_" in lower:
        return ColumnType.AGE

    if any(h in lower for h in _DISTANCE_HINTS):
        return ColumnType.DISTANCE

    if _share(values, lambda v: v.strip().lower() in BOOLEAN_WORDS) > threshold:
        return ColumnType.BOOLEAN

    if _share(values, lambda v: parse_leading_float(v) is not None) > threshold:
        return ColumnType.NUMERIC

    return ColumnType.CATEGORICAL


def first_seen_categories(values: Iterable[str], limit: int) -> Tuple[str, ...]:
    """Distinct trimmed values in first-seen order, capped at `limit`."""
    seen = {}
    for raw in values:
        value = raw.strip()
        if value and value not in seen:
            seen[value] = None
    return tuple(list(seen)[:limit])


def build_column_specs(
    columns: Sequence[str],
    column_values: dict,
    threshold: float = 0.7,
    max_categories: int = 20,
) -> List[ColumnSpec]:
    """
    Detect a ColumnSpec for every column.

    `column_values` maps column name -> list of raw values in dataset order
    (members first, then contacts).
    """
    specs = []
    for col in columns:
        raw = [v.strip() for v in column_values.get(col, [])]
        non_empty = [v for v in raw if v]
        col_type = detect_column_type(col, non_empty, threshold)
        categories: Tuple[str, ...] = ()
        if col_type is ColumnType.CATEGORICAL:
            categories = first_seen_categories(non_empty, max_categories)
            dropped = len(set(non_empty)) - len(categories)
            if dropped > 0:
                logger.debug("Column %s: %d categories beyond cap ignored", col, dropped)
        logger.debug("Column %s detected as %s", col, col_type.value)
        specs.append(ColumnSpec(name=col, column_type=col_type, categories=categories))
    return specs
