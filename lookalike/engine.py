"""
lookalike/engine.py

Single entry point for a scoring run:

    members + contacts (+ optional geo enrichment)
      -> column types -> feature matrix -> min-max normalization
      -> logistic regression (members = 1, contacts = 0)
      -> importances/explanations + ranked contact scores

A run is stateless and deterministic: same inputs and config, same output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from lookalike.column_types import ColumnSpec, build_column_specs
from lookalike.config import DEFAULT_CONFIG, EngineConfig
from lookalike.features import build_feature_matrix, normalize
from lookalike.gazetteer import COLUMBIA_MD, Municipality
from lookalike.geo import detect_address_field, enrich_records
from lookalike.importance import FeatureImportance, analyze_importances
from lookalike.inference import PredictionResult, score_contacts
from lookalike.model import Model, accuracy_percent, train_logistic_regression
from lookalike.records import Record, headers_of, records_to_frame, shared_headers


logger = logging.getLogger(__name__)

NO_COMMON_COLUMNS = (
    "No common columns found between member and contact lists. "
    "Please ensure both CSVs share at least some column headers."
)


class InputError(ValueError):
    """The two datasets cannot be compared (e.g. no shared, included columns)."""


@dataclass(frozen=True)
class AnalysisResult:
    feature_importances: Tuple[FeatureImportance, ...]
    predictions: Tuple[PredictionResult, ...]
    model_accuracy: int
    total_members: int
    total_contacts: int
    validation_accuracy: Optional[int] = None
    column_specs: Tuple[ColumnSpec, ...] = field(default=(), repr=False)
    model: Optional[Model] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict:
        out = {
            "featureImportances": [fi.to_dict() for fi in self.feature_importances],
            "predictions": [p.to_dict() for p in self.predictions],
            "modelAccuracy": self.model_accuracy,
            "totalMembers": self.total_members,
            "totalContacts": self.total_contacts,
        }
        if self.validation_accuracy is not None:
            out["validationAccuracy"] = self.validation_accuracy
        return out


def _train(X: np.ndarray, y: np.ndarray, config: EngineConfig, cancel, names=()) -> Model:
    return train_logistic_regression(
        X,
        y,
        learning_rate=config.learning_rate,
        iterations=config.iterations,
        l2_penalty=config.l2_penalty,
        tolerance=config.tolerance,
        cancel=cancel,
        feature_names=names,
    )


def _validation_accuracy(X: np.ndarray, y: np.ndarray, config: EngineConfig, cancel) -> Optional[int]:
    """
    Accuracy of a second model fit on a stratified training split and scored
    on the held-out rows. Reported alongside, never instead of, training accuracy.
    """
    try:
        train_idx, val_idx = train_test_split(
            np.arange(len(y)),
            test_size=config.validation_fraction,
            random_state=config.random_state,
            shuffle=True,
            stratify=y,
        )
    except ValueError as e:
        logger.warning("Validation split skipped: %s", e)
        return None
    held_out = _train(X[train_idx], y[train_idx], config, cancel)
    return accuracy_percent(held_out, X[val_idx], y[val_idx])


def analyze_and_predict(
    member_records: Sequence[Record],
    contact_records: Sequence[Record],
    columns: Optional[Iterable[str]] = None,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    geo: bool = False,
    address_field: Optional[str] = None,
    municipality: Municipality = COLUMBIA_MD,
    now: Optional[pd.Timestamp] = None,
    cancel: Optional[Callable[[], bool]] = None,
) -> AnalysisResult:
    """
    Train on members vs contacts and score the contacts.

    Parameters
    ----------
    member_records, contact_records : sequences of field -> string mappings
    columns : iterable of str, optional
        Inclusion list. Only headers shared by both datasets AND listed here
        are used. None means every shared header.
    geo : bool
        Add the synthetic residency fields before anything else. The address
        field is auto-detected from the member headers unless given.
    now : Timestamp, optional
        Reference time for "days since" columns (defaults to the current time).
    cancel : callable, optional
        Polled during geo enrichment and training; True aborts the run with
        AnalysisCancelled.

    Raises
    ------
    InputError
        When no included column is shared by both datasets.
    """
    members: List[Mapping[str, str]] = list(member_records)
    contacts: List[Mapping[str, str]] = list(contact_records)

    if geo:
        address_field = address_field or detect_address_field(headers_of(members))
        if address_field:
            members = enrich_records(members, address_field, municipality, cancel)
            contacts = enrich_records(contacts, address_field, municipality, cancel)
            logger.info("Geo enrichment applied using address field %r", address_field)
        else:
            logger.warning("Geo enrichment requested but no address field was found")

    common = shared_headers(headers_of(members), headers_of(contacts))
    if columns is not None:
        wanted = set(columns)
        common = [c for c in common if c in wanted]
    if not common:
        raise InputError(NO_COMMON_COLUMNS)

    records = members + contacts
    n_members = len(members)
    labels = np.array([1] * n_members + [0] * len(contacts), dtype=float)

    frame = records_to_frame(records, common)
    specs = build_column_specs(
        common,
        {c: frame[c].tolist() for c in common},
        threshold=config.type_threshold,
        max_categories=config.max_categories,
    )
    logger.info(
        "Column types: %s", ", ".join(f"{s.name}={s.column_type.value}" for s in specs)
    )

    reference = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    raw = build_feature_matrix(frame, specs, now=reference, missing_days_since=config.missing_days_since)
    matrix = normalize(raw)
    logger.info("Training on %d rows x %d features", matrix.n_rows, matrix.n_features)

    model = _train(matrix.values, labels, config, cancel, matrix.names)
    accuracy = accuracy_percent(model, matrix.values, labels)
    logger.info("Training accuracy: %d%% after %d iterations", accuracy, model.iterations_run)

    validation = None
    if config.validation_fraction > 0:
        validation = _validation_accuracy(matrix.values, labels, config, cancel)

    importances = analyze_importances(
        model, matrix, labels, n_members, specs, records,
        place=municipality.name, place_long=municipality.label,
    )
    _, contact_rows = matrix.split(n_members)
    predictions = score_contacts(model, contact_rows, contacts, matrix.names, config.max_factors)

    return AnalysisResult(
        feature_importances=tuple(importances),
        predictions=tuple(predictions),
        model_accuracy=accuracy,
        total_members=n_members,
        total_contacts=len(contacts),
        validation_accuracy=validation,
        column_specs=tuple(specs),
        model=model,
    )
