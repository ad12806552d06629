"""
lookalike/config.py

Run settings for one analysis: gradient-descent hyperparameters plus the
tunable heuristics used while detecting column types and building features.

Defaults reproduce the stock engine behavior:
  - learning_rate 0.5, iterations 2000, l2_penalty 0.01
  - 70% of values must agree before a column counts as date/boolean/numeric
  - at most 20 one-hot categories per column
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable settings for a single analyze_and_predict() run.
    The same object can be shared across runs.
    """
    learning_rate: float = 0.5
    iterations: int = 2000
    l2_penalty: float = 0.01

    # Fraction of non-empty values that must look like a date / boolean / number.
    type_threshold: float = 0.7
    # One-hot cap per categorical column (first-seen order).
    max_categories: int = 20
    # Number of contributing factors attached to each prediction.
    max_factors: int = 10
    # Encoded value for a missing or unparsable "days since" date.
    missing_days_since: float = 999.0

    # Optional early stopping; None keeps the fixed iteration count.
    tolerance: Optional[float] = None
    # Optional held-out split for an extra validation accuracy figure.
    validation_fraction: float = 0.0
    random_state: int = 42

    def __post_init__(self) -> None:
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if self.l2_penalty < 0:
            raise ValueError(f"l2_penalty must be >= 0, got {self.l2_penalty}")
        if not 0 < self.type_threshold <= 1:
            raise ValueError(f"type_threshold must be in (0, 1], got {self.type_threshold}")
        if self.max_categories < 1:
            raise ValueError(f"max_categories must be >= 1, got {self.max_categories}")
        if self.max_factors < 1:
            raise ValueError(f"max_factors must be >= 1, got {self.max_factors}")
        if self.tolerance is not None and self.tolerance <= 0:
            raise ValueError(f"tolerance must be > 0 when set, got {self.tolerance}")
        if not 0 <= self.validation_fraction < 1:
            raise ValueError(
                f"validation_fraction must be in [0, 1), got {self.validation_fraction}"
            )

    def to_dict(self) -> Dict:
        return asdict(self)


DEFAULT_CONFIG = EngineConfig()
