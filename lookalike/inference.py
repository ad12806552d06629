"""
lookalike/inference.py

Purpose
-------
Centralizes "scoring-time" logic: applying trained weights to contact rows,
bounding the score, picking the factors that drove it, and shaping results
into tables for export.

Kept separate from training so the same code serves the CLI, the dashboard
and notebooks without pulling in the gradient-descent loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from lookalike.model import Model
from lookalike.parsing import round_half_up


SCORE_COLUMN = "Membership_Score"
MIN_SCORE = 1
MAX_SCORE = 100


@dataclass(frozen=True)
class Factor:
    field: str
    contribution: float

    def to_dict(self) -> Dict:
        return {"field": self.field, "contribution": self.contribution}


@dataclass(frozen=True)
class PredictionResult:
    """
    One scored contact.

    original_data : the untouched input record (geo-enriched if enrichment ran)
    score         : membership likelihood, integer in [1, 100]
    factors       : up to N features by |contribution|, largest first
    """
    original_data: Mapping[str, str]
    score: int
    factors: Tuple[Factor, ...] = field(default=())

    def to_dict(self) -> Dict:
        return {
            "originalData": dict(self.original_data),
            "score": self.score,
            "factors": [f.to_dict() for f in self.factors],
        }


def to_score(probability: float) -> int:
    """Map a probability onto 1..100; 0 is never produced."""
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(probability * 99 + 1)))


def top_factors(
    weights: np.ndarray, row: np.ndarray, feature_names: Sequence[str], limit: int = 10
) -> Tuple[Factor, ...]:
    """
    Per-feature contribution w_j * x_j (rounded to 2 decimals), sorted by
    absolute size. Ties keep feature order.
    """
    contributions = [
        Factor(field=name, contribution=round_half_up(w * x * 100) / 100)
        for name, w, x in zip(feature_names, weights, row)
    ]
    contributions.sort(key=lambda f: abs(f.contribution), reverse=True)
    return tuple(contributions[:limit])


def score_contacts(
    model: Model,
    contact_rows: np.ndarray,
    records: Sequence[Mapping[str, str]],
    feature_names: Sequence[str],
    max_factors: int = 10,
) -> List[PredictionResult]:
    """
    Score every contact and rank them.

    Parameters
    ----------
    model : Model
        Trained weights + bias.
    contact_rows : np.ndarray
        Normalized feature rows for the contacts, shape (n_contacts, n_features).
        Must come from the same normalization pass used in training.
    records : Sequence[Mapping[str, str]]
        Raw contact records, aligned with contact_rows.
    feature_names : Sequence[str]
        Names for each matrix column.

    Returns
    -------
    List[PredictionResult]
        Sorted by score, highest first (stable for equal scores).
    """
    if len(records) != len(contact_rows):
        raise ValueError(
            f"{len(records)} contact records but {len(contact_rows)} feature rows"
        )

    probabilities = model.predict_proba(contact_rows) if len(contact_rows) else np.zeros(0)
    predictions = [
        PredictionResult(
            original_data=record,
            score=to_score(float(p)),
            factors=top_factors(model.weights, row, feature_names, max_factors),
        )
        for record, row, p in zip(records, contact_rows, probabilities)
    ]
    predictions.sort(key=lambda p: p.score, reverse=True)
    return predictions


def predictions_to_frame(
    predictions: Sequence[PredictionResult], headers: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """
    Ranked contacts as a table: the original columns plus a trailing
    Membership_Score column. Missing cells become "".

    `headers` fixes column order; defaults to the first-seen keys.
    """
    if headers is None:
        seen: Dict[str, None] = {}
        for p in predictions:
            for key in p.original_data:
                seen.setdefault(key, None)
        headers = list(seen)

    rows = [
        {**{h: p.original_data.get(h, "") for h in headers}, SCORE_COLUMN: p.score}
        for p in predictions
    ]
    return pd.DataFrame(rows, columns=[*headers, SCORE_COLUMN])


def importances_to_frame(importances: Sequence) -> pd.DataFrame:
    cols = ["field", "importance", "correlation", "confidence", "direction", "explanation"]
    return pd.DataFrame([fi.to_dict() for fi in importances], columns=cols)
