"""
Tests for the gradient-descent logistic regression.
"""

import numpy as np
import pytest

from lookalike.model import (
    AnalysisCancelled,
    Model,
    accuracy_percent,
    sigmoid,
    train_logistic_regression,
)


def separable_data(n=40):
    X = np.vstack([np.ones((n, 2)), np.zeros((n, 2))])
    y = np.array([1.0] * n + [0.0] * n)
    return X, y


class TestSigmoid:

    def test_midpoint(self):
        assert sigmoid(0.0) == 0.5

    def test_extremes_do_not_overflow(self):
        with np.errstate(over="raise"):
            assert sigmoid(1e6) == pytest.approx(1.0)
            assert 0.0 < sigmoid(-1e6) < 1e-200

    def test_vectorized(self):
        out = sigmoid(np.array([-1.0, 0.0, 1.0]))
        assert out.shape == (3,)
        assert out[0] == pytest.approx(1 - out[2])


class TestTraining:

    def test_learns_positive_weights_for_member_traits(self):
        X, y = separable_data()
        model = train_logistic_regression(X, y, learning_rate=0.5, iterations=2000)
        assert (model.weights > 0).all()
        assert model.bias < 0
        assert accuracy_percent(model, X, y) == 100

    def test_deterministic(self):
        X, y = separable_data()
        a = train_logistic_regression(X, y, iterations=300)
        b = train_logistic_regression(X, y, iterations=300)
        np.testing.assert_array_equal(a.weights, b.weights)
        assert a.bias == b.bias

    def test_runs_all_iterations_without_tolerance(self):
        X, y = separable_data()
        model = train_logistic_regression(X, y, iterations=25)
        assert model.iterations_run == 25

    def test_tolerance_stops_early(self):
        X, y = separable_data()
        model = train_logistic_regression(X, y, iterations=500, tolerance=1.0)
        assert model.iterations_run == 1

    def test_cancel_raises(self):
        X, y = separable_data()
        calls = []

        def cancel():
            calls.append(1)
            return len(calls) > 3

        with pytest.raises(AnalysisCancelled):
            train_logistic_regression(X, y, iterations=100, cancel=cancel)
        assert len(calls) == 4

    def test_empty_dataset_gives_zero_model(self):
        model = train_logistic_regression(np.zeros((0, 3)), np.zeros(0))
        np.testing.assert_array_equal(model.weights, np.zeros(3))
        assert model.bias == 0.0

    def test_constant_feature_keeps_zero_weight(self):
        X, y = separable_data()
        X = np.column_stack([X, np.zeros(len(y))])
        model = train_logistic_regression(X, y, iterations=200)
        assert model.weights[2] == 0.0


class TestModel:

    def test_weights_are_read_only(self):
        model = Model(weights=np.array([1.0, -1.0]), bias=0.0)
        with pytest.raises(ValueError):
            model.weights[0] = 2.0

    def test_predict(self):
        model = Model(weights=np.array([2.0]), bias=-1.0)
        np.testing.assert_array_equal(model.predict(np.array([[0.0], [1.0]])), [0, 1])
        assert model.predict_proba(np.array([[0.5]]))[0] == pytest.approx(0.5)
