"""
lookalike/importance.py

Feature importance, correlation and confidence for a trained model.

  importance  = 100 * |w| / max|w|        (max floored at 0.001), whole number
  correlation = point-biserial r between the normalized feature and the label
  confidence  = heuristic, NOT a significance test:
                min(99, round(|mean_members - mean_contacts| * 100
                              * sqrt(min(n_members, n_contacts) / 10)))
                floored at 1. It rewards clear mean separation and bigger
                samples but is not calibrated to any p-value.

Binary fields (gender, parental status) get one weight from the model. To show
both sides, the entry is renamed "column (more likely value)" and paired with
a synthetic "column (less likely value)" entry carrying the negated
correlation and the opposite direction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Sequence

import numpy as np

from lookalike.column_types import ColumnSpec, ColumnType
from lookalike.explanations import (
    NEGATIVE,
    POSITIVE,
    binary_poles,
    binary_values,
    complementary_explanation,
    generate_explanation,
)
from lookalike.features import FeatureMatrix
from lookalike.model import Model
from lookalike.parsing import round_half_up


logger = logging.getLogger(__name__)

MIN_WEIGHT_SCALE = 0.001


@dataclass(frozen=True)
class FeatureImportance:
    field: str
    importance: int
    correlation: float
    confidence: int
    direction: str
    explanation: str
    column: str = ""

    def to_dict(self) -> Dict:
        return {
            "field": self.field,
            "importance": self.importance,
            "correlation": self.correlation,
            "confidence": self.confidence,
            "direction": self.direction,
            "explanation": self.explanation,
        }


def point_biserial(feature: np.ndarray, labels: np.ndarray) -> float:
    """Pearson correlation against a 0/1 label; 0 when either side has no variance."""
    x = np.asarray(feature, dtype=float)
    y = np.asarray(labels, dtype=float)
    if len(x) == 0:
        return 0.0
    dx = x - x.mean()
    dy = y - y.mean()
    denom = math.sqrt(float(dx @ dx) * float(dy @ dy))
    if denom == 0:
        return 0.0
    return float(np.clip((dx @ dy) / denom, -1.0, 1.0))


def confidence_score(member_values: np.ndarray, contact_values: np.ndarray) -> int:
    n_members, n_contacts = len(member_values), len(contact_values)
    member_mean = float(np.sum(member_values)) / max(n_members, 1)
    contact_mean = float(np.sum(contact_values)) / max(n_contacts, 1)
    diff = abs(member_mean - contact_mean)
    raw = round_half_up(diff * 100 * math.sqrt(min(n_members, n_contacts) / 10))
    return max(1, min(99, raw))


def importance_scores(weights: np.ndarray) -> List[int]:
    weights = np.abs(np.asarray(weights, dtype=float))
    scale = max(float(weights.max()) if len(weights) else 0.0, MIN_WEIGHT_SCALE)
    return [round_half_up(w / scale * 100) for w in weights]


def _round_corr(r: float) -> float:
    return round_half_up(r * 100) / 100


def _complete_binary_pairs(
    entries: List[FeatureImportance],
    model: Model,
    specs: Sequence[ColumnSpec],
    records: Sequence[Mapping[str, str]],
) -> List[FeatureImportance]:
    """Rename binary entries after their likelier value and slot the complement right after."""
    binary_types = {s.name: s.column_type for s in specs if s.column_type.is_binary}
    out: List[FeatureImportance] = []
    for idx, entry in enumerate(entries):
        column_type = binary_types.get(entry.field)
        values = binary_values(records, entry.field) if column_type else None
        if values is None:
            out.append(entry)
            continue

        high, low = binary_poles(values, column_type)
        if model.weights[idx] >= 0:
            more, less, corr = high, low, entry.correlation
        else:
            more, less, corr = low, high, -entry.correlation
        corr = corr if corr != 0 else 0.0
        corr_pct = round_half_up(abs(corr) * 100)

        out.append(replace(entry, field=f"{entry.column} ({more})", correlation=corr, direction=POSITIVE))
        out.append(FeatureImportance(
            field=f"{entry.column} ({less})",
            importance=entry.importance,
            correlation=-corr if corr != 0 else 0.0,
            confidence=entry.confidence,
            direction=NEGATIVE,
            explanation=complementary_explanation(column_type, more, less, corr_pct, entry.confidence),
            column=entry.column,
        ))
    return out


def order_importances(entries: Sequence[FeatureImportance]) -> List[FeatureImportance]:
    """
    Group entries by base column, sort groups by their best importance
    (descending, stable), flatten, then drop zero-importance entries.
    """
    groups: Dict[str, List[FeatureImportance]] = {}
    for entry in entries:
        groups.setdefault(entry.column or entry.field, []).append(entry)
    ordered = sorted(groups.values(), key=lambda g: max(e.importance for e in g), reverse=True)
    return [e for group in ordered for e in group if e.importance > 0]


def analyze_importances(
    model: Model,
    matrix: FeatureMatrix,
    labels: np.ndarray,
    n_members: int,
    specs: Sequence[ColumnSpec],
    records: Sequence[Mapping[str, str]],
    place: str = "Columbia",
    place_long: str = "Columbia, MD",
) -> List[FeatureImportance]:
    """
    Build the final, ordered importance list for a trained model.

    `matrix` is the normalized combined matrix (members first) and `records`
    the matching raw rows, used to name binary field values.
    """
    types = {s.name: s.column_type for s in specs}
    member_rows, contact_rows = matrix.split(n_members)
    scores = importance_scores(model.weights)

    entries: List[FeatureImportance] = []
    for j, name in enumerate(matrix.names):
        column = matrix.columns[j]
        correlation = point_biserial(matrix.values[:, j], labels)
        confidence = confidence_score(member_rows[:, j], contact_rows[:, j])
        direction = POSITIVE if model.weights[j] >= 0 else NEGATIVE
        explanation = generate_explanation(
            name,
            types.get(column, ColumnType.NUMERIC),
            direction,
            round_half_up(abs(correlation) * 100),
            confidence,
            records,
            place=place,
            place_long=place_long,
        )
        entries.append(FeatureImportance(
            field=name,
            importance=scores[j],
            correlation=_round_corr(correlation),
            confidence=confidence,
            direction=direction,
            explanation=explanation,
            column=column,
        ))

    entries = _complete_binary_pairs(entries, model, specs, records)
    ordered = order_importances(entries)
    logger.debug("%d of %d importance entries kept", len(ordered), len(entries))
    return ordered
