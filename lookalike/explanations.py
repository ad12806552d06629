"""
lookalike/explanations.py

One plain-English sentence per feature, phrased for people who will never see
a weight vector. Every sentence embeds the rounded correlation and confidence
percentages.

The days_since branch is phrased in terms of recency: a NEGATIVE weight (more
days since the last visit -> less likely) reads as "visited more recently are
more likely".
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

from lookalike.column_types import ColumnType
from lookalike.encoding import encode_value


POSITIVE = "positive"
NEGATIVE = "negative"

DEFAULT_PLACE = "Columbia"
DEFAULT_PLACE_LONG = "Columbia, MD"


def binary_values(records: Sequence[Mapping[str, str]], column: str) -> Optional[Tuple[str, str]]:
    """
    The two distinct values of a binary column, in first-seen order.

    Values are compared case-insensitively; the first spelling seen is kept.
    Returns None unless exactly two distinct values exist.
    """
    seen = {}
    for row in records:
        value = (row.get(column) or "").strip()
        if value and value.lower() not in seen:
            seen[value.lower()] = value
    if len(seen) != 2:
        return None
    first, second = seen.values()
    return first, second


def binary_poles(values: Tuple[str, str], column_type: ColumnType) -> Tuple[str, str]:
    """
    Return (high, low): the value that encodes to the larger number comes
    first, so after min-max scaling it is the one sitting at 1.
    Ties keep first-seen order.
    """
    a, b = values
    if encode_value(b, column_type) > encode_value(a, column_type):
        return b, a
    return a, b


def _more_and_less(records, column: str, column_type: ColumnType, direction: str):
    values = binary_values(records, column)
    if values is None:
        return None
    high, low = binary_poles(values, column_type)
    return (high, low) if direction == POSITIVE else (low, high)


def _stats(corr_pct: int, confidence: int) -> str:
    return f"({corr_pct}% correlation, {confidence}% confidence)"


def generate_explanation(
    name: str,
    column_type: ColumnType,
    direction: str,
    corr_pct: int,
    confidence: int,
    records: Sequence[Mapping[str, str]] = (),
    place: str = DEFAULT_PLACE,
    place_long: str = DEFAULT_PLACE_LONG,
) -> str:
    """
    Render the explanation for one feature.

    Parameters
    ----------
    name : str
        Feature name ("column" or "column::value" for one-hot features).
    column_type : ColumnType
        Type of the feature's base column.
    direction : str
        "positive" if the model weight is >= 0, else "negative".
    corr_pct : int
        |correlation| as a whole percentage.
    confidence : int
        Confidence heuristic, 1-99.
    records : sequence of records
        Raw combined dataset, used to name the two sides of binary fields.
    """
    positive = direction == POSITIVE
    stats = _stats(corr_pct, confidence)
    friendly = name.replace("_", " ")

    if "::" in name:
        field, value = name.split("::", 1)
        trend = "higher" if positive else "lower"
        return (
            f'Having "{value}" as {field.replace("_", " ")} is associated with '
            f"{trend} membership likelihood {stats}."
        )

    if column_type is ColumnType.DAYS_SINCE:
        if not positive:
            return (
                f"People who visited more recently (fewer days since last visit) are more likely "
                f"to be members {stats}. Each additional day since the last visit decreases the "
                f"likelihood of membership."
            )
        return (
            f"People who visited less recently (more days since last visit) are, surprisingly, "
            f"more associated with membership {stats}. This may indicate long-term loyal members "
            f"who don't need to visit frequently."
        )

    if column_type is ColumnType.DATE:
        if "birth" in name.lower():
            if positive:
                return f"Younger individuals (more recent birthdates) are more likely to be members {stats}."
            return f"Older individuals (earlier birthdates) are more likely to be members {stats}."
        if positive:
            return f"More recent dates in {friendly} correlate with membership {stats}."
        return f"Earlier dates in {friendly} correlate with membership {stats}."

    if column_type is ColumnType.BINARY_GENDER:
        sides = _more_and_less(records, name, column_type, direction)
        if sides:
            more, less = sides
            return (
                f"{more} individuals are more likely to be members than {less} individuals {stats}. "
                f"As a binary field, one gender must be more likely and the other less likely. "
                f"The confidence level indicates how strong this distinction is."
            )

    if column_type is ColumnType.BINARY_PARENTAL:
        sides = _more_and_less(records, name, column_type, direction)
        if sides:
            more, less = sides
            return (
                f'Individuals with "{more}" parental status are more likely to be members than '
                f'those with "{less}" status {stats}. As a binary field, one status must be more '
                f"likely and the other less likely."
            )

    if column_type is ColumnType.AGE:
        if positive:
            return (
                f"Older individuals (higher age) are more likely to be members {stats}. "
                f"The typical member tends to be older than the typical non-member."
            )
        return (
            f"Younger individuals (lower age) are more likely to be members {stats}. "
            f"The typical member tends to be younger than the typical non-member."
        )

    if column_type is ColumnType.DISTANCE:
        if positive:
            return (
                f"Greater distance from {place} is associated with membership {stats}. "
                f"This is unusual: members tend to live farther away."
            )
        return (
            f"Closer proximity to {place} correlates with membership {stats}. "
            f"Members tend to live nearer to {place_long}."
        )

    if column_type is ColumnType.BOOLEAN:
        if positive:
            return f'A "yes" or positive value for {friendly} correlates with membership {stats}.'
        return f'A "no" or negative value for {friendly} correlates with membership {stats}.'

    if positive:
        return (
            f"Higher {friendly} values correlate with membership {stats}. "
            f"Members tend to have higher {friendly} than non-members."
        )
    return (
        f"Lower {friendly} values correlate with membership {stats}. "
        f"Members tend to have lower {friendly} than non-members."
    )


def complementary_explanation(
    column_type: ColumnType, more: str, less: str, corr_pct: int, confidence: int
) -> str:
    """Sentence for the synthetic "less likely" side of a binary field."""
    stats = _stats(corr_pct, confidence)
    if column_type is ColumnType.BINARY_GENDER:
        return (
            f"{less} individuals are less likely to be members than {more} individuals {stats}. "
            f"This is the complementary result of the gender analysis above."
        )
    return (
        f'Individuals with "{less}" parental status are less likely to be members than those '
        f'with "{more}" status {stats}. This is the complementary result of the parental '
        f"status analysis."
    )
