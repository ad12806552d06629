"""
lookalike/model.py

Binary logistic regression trained by full-batch gradient descent with an L2
penalty. Members are the positive class (1), contacts the background class (0).

Per iteration (m rows):
    z      = bias + X @ w
    error  = sigmoid(z) - y
    dw     = X.T @ error + l2 * w        (l2 * w / m added once per row)
    db     = sum(error)
    w     -= (lr / m) * dw
    bias  -= (lr / m) * db

No randomness anywhere: weights start at zero, so identical inputs always give
identical models.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics import accuracy_score

from lookalike.parsing import round_half_up


logger = logging.getLogger(__name__)

SIGMOID_CLAMP = 500.0


class AnalysisCancelled(RuntimeError):
    """Raised when the caller's cancel() callback asks a run to stop."""


def sigmoid(z):
    """Logistic function; the argument is clamped to [-500, 500] so exp() never overflows."""
    z = np.clip(np.asarray(z, dtype=float), -SIGMOID_CLAMP, SIGMOID_CLAMP)
    return 1.0 / (1.0 + np.exp(-z))


@dataclass(frozen=True)
class Model:
    """
    Trained weights: one per feature, plus a scalar bias.

    Produced once per analysis run and never mutated afterwards.
    """
    weights: np.ndarray
    bias: float
    feature_names: Tuple[str, ...] = ()
    iterations_run: int = 0

    def __post_init__(self) -> None:
        self.weights.setflags(write=False)

    def decision_function(self, X: np.ndarray) -> np.ndarray:
        return self.bias + np.asarray(X, dtype=float) @ self.weights

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return sigmoid(self.decision_function(X))

    def predict(self, X: np.ndarray, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(X) >= threshold).astype(int)


def train_logistic_regression(
    X: np.ndarray,
    y: np.ndarray,
    learning_rate: float = 0.5,
    iterations: int = 2000,
    l2_penalty: float = 0.01,
    tolerance: Optional[float] = None,
    cancel: Optional[Callable[[], bool]] = None,
    feature_names: Sequence[str] = (),
) -> Model:
    """
    Fit weights with a fixed number of gradient steps.

    Parameters
    ----------
    X : np.ndarray
        Normalized feature matrix, shape (m, n).
    y : np.ndarray
        0/1 labels, shape (m,).
    tolerance : float, optional
        Early stopping: stop once no weight (nor the bias) moves by more than
        this in a single step. None runs all iterations.
    cancel : callable, optional
        Polled once per iteration; returning True raises AnalysisCancelled.
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    m, n = X.shape
    weights = np.zeros(n)
    bias = 0.0

    if m == 0:
        return Model(weights=weights, bias=bias, feature_names=tuple(feature_names))

    step = learning_rate / m
    done = 0
    for it in range(iterations):
        if cancel is not None and cancel():
            raise AnalysisCancelled(f"training cancelled after {it} iterations")

        error = sigmoid(bias + X @ weights) - y
        dw = X.T @ error + l2_penalty * weights
        db = float(error.sum())

        delta_w = step * dw
        delta_b = step * db
        weights = weights - delta_w
        bias -= delta_b
        done = it + 1

        if tolerance is not None:
            largest = max(float(np.max(np.abs(delta_w))) if n else 0.0, abs(delta_b))
            if largest < tolerance:
                logger.debug("Converged after %d iterations (step %.3g)", done, largest)
                break

    return Model(weights=weights, bias=bias, feature_names=tuple(feature_names), iterations_run=done)


def accuracy_percent(model: Model, X: np.ndarray, y: np.ndarray) -> int:
    """Share of rows classified correctly at threshold 0.5, as a whole percentage."""
    if len(y) == 0:
        return 0
    return round_half_up(accuracy_score(np.asarray(y, dtype=int), model.predict(X)) * 100)
