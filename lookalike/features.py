"""
lookalike/features.py

Feature building and min-max normalization.

Input is the combined member + contact table (members first) and one
ColumnSpec per included column. Output is a rectangular FeatureMatrix:
  - one row per record, in dataset order
  - one column per feature, in ColumnSpec order
      * single-feature types -> encoded value, named after the column
      * categorical          -> one 0/1 indicator per known category,
                                named "column::value"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from lookalike.column_types import ColumnSpec, ColumnType
from lookalike.encoding import MISSING_DAYS_SINCE, encode_value


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureMatrix:
    """
    Owned, read-only feature matrix.

    names   : feature names, one per matrix column
    columns : base input column for each feature (same length as names)
    values  : float array of shape (n_rows, n_features)
    """
    names: Tuple[str, ...]
    columns: Tuple[str, ...]
    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 2 or self.values.shape[1] != len(self.names):
            raise ValueError(
                f"values shape {self.values.shape} does not match {len(self.names)} feature names"
            )
        self.values.setflags(write=False)

    @property
    def n_rows(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.values.shape[1])

    def with_values(self, values: np.ndarray) -> "FeatureMatrix":
        return FeatureMatrix(names=self.names, columns=self.columns, values=values)

    def split(self, n_head: int) -> Tuple[np.ndarray, np.ndarray]:
        """Split rows into (first n_head rows, remaining rows)."""
        return self.values[:n_head], self.values[n_head:]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, columns=list(self.names))


def _encode_column(series: pd.Series, spec: ColumnSpec, now, missing_days_since: float) -> np.ndarray:
    encoded = np.array(series.map(
        lambda v: encode_value(v, spec.column_type, now=now, missing_days_since=missing_days_since)
    ), dtype=float)
    # "Infinity" / overflow cells would poison the scaler; treat them as missing
    encoded[~np.isfinite(encoded)] = 0.0
    return encoded


def build_feature_matrix(
    frame: pd.DataFrame,
    specs: Sequence[ColumnSpec],
    now: Optional[pd.Timestamp] = None,
    missing_days_since: float = MISSING_DAYS_SINCE,
) -> FeatureMatrix:
    """
    Encode every record of `frame` into the feature space described by `specs`.

    `frame` must hold strings; missing cells should already be "".
    Values outside a categorical column's known categories produce an
    all-zero indicator block.
    """
    names: List[str] = []
    columns: List[str] = []
    blocks: List[np.ndarray] = []

    for spec in specs:
        series = frame[spec.name] if spec.name in frame.columns else pd.Series([""] * len(frame))
        series = series.fillna("").astype(str).str.strip()

        if spec.column_type is ColumnType.CATEGORICAL:
            for category, feature_name in zip(spec.categories, spec.feature_names):
                blocks.append((series == category).to_numpy(dtype=float))
                names.append(feature_name)
                columns.append(spec.name)
        else:
            blocks.append(_encode_column(series, spec, now, missing_days_since))
            names.append(spec.name)
            columns.append(spec.name)

    if blocks:
        values = np.column_stack(blocks)
    else:
        values = np.zeros((len(frame), 0))

    logger.debug("Built feature matrix %s from %d columns", values.shape, len(specs))
    return FeatureMatrix(names=tuple(names), columns=tuple(columns), values=values)


def normalize(matrix: FeatureMatrix) -> FeatureMatrix:
    """
    Min-max scale every feature to [0, 1] over all rows.

    Zero-variance columns map to 0 (MinMaxScaler treats a zero range as 1,
    so (x - min) * 1 == 0).
    """
    if matrix.n_rows == 0 or matrix.n_features == 0:
        return matrix
    scaled = MinMaxScaler().fit_transform(np.array(matrix.values, dtype=float))
    return matrix.with_values(np.clip(scaled, 0.0, 1.0))
