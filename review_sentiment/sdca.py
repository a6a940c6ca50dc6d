"""Logistic regression trained by stochastic dual coordinate ascent (SDCA).

Primal problem, with labels ``y_i`` in {-1, +1} and the bias folded in as a
constant feature::

    P(w) = 1/n * sum_i log(1 + exp(-y_i * w.x_i)) + lam/2 * ||w||^2

Dual variables ``alpha_i`` live in [0, 1] and the primal point is always
``w = 1/(lam*n) * sum_i alpha_i * y_i * x_i``. Each coordinate step maximises
the dual along one ``alpha_i`` with a safeguarded Newton solve; training stops
once the duality gap ``P(w) - D(alpha)`` drops below ``tol``.
"""
from __future__ import annotations
import logging
import numpy as np
import scipy.sparse as sp
from scipy.special import expit
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.utils.validation import check_array, check_is_fitted

from .entities import Prediction
from .errors import InsufficientDataError

log = logging.getLogger(__name__)

EPS = 1e-12


def _entropy(a: np.ndarray) -> np.ndarray:
    a = np.clip(a, EPS, 1.0 - EPS)
    return -(a * np.log(a) + (1.0 - a) * np.log1p(-a))


def _dual_coordinate(alpha: float, margin: float, q: float, steps: int) -> float:
    """Maximise one coordinate of the dual.

    f(a) = H(a) - (a - alpha) * margin - (a - alpha)^2 * q / 2, where H is the
    binary entropy. The optimum satisfies a = sigmoid(-margin - (a - alpha) * q),
    so Newton starts from sigmoid(-margin) and is kept strictly inside (0, 1).
    """
    a = min(max(float(expit(-margin)), EPS), 1.0 - EPS)
    for _ in range(steps):
        grad = -np.log(a / (1.0 - a)) - margin - (a - alpha) * q
        hess = -1.0 / (a * (1.0 - a)) - q
        nxt = a - grad / hess
        if nxt <= 0.0:
            nxt = a / 2.0
        elif nxt >= 1.0:
            nxt = (1.0 + a) / 2.0
        nxt = min(max(nxt, EPS), 1.0 - EPS)
        if abs(nxt - a) < 1e-12:
            return nxt
        a = nxt
    return a


class SdcaLogisticRegression(ClassifierMixin, BaseEstimator):
    def __init__(self, l2_regularization=1e-2, max_iter=500, tol=1e-4,
                 bias_scale=1.0, newton_steps=10, random_state=42):
        self.l2_regularization = l2_regularization
        self.max_iter = max_iter
        self.tol = tol
        self.bias_scale = bias_scale
        self.newton_steps = newton_steps
        self.random_state = random_state

    def fit(self, X, y):
        y = np.asarray(y).astype(bool).ravel()
        if not (y.any() and (~y).any()):
            raise InsufficientDataError("training needs at least one positive and one negative example")
        n_rows = X.shape[0] if hasattr(X, "shape") else len(X)
        if n_rows != len(y):
            raise InsufficientDataError(f"{n_rows} feature vectors but {len(y)} labels")
        if self.l2_regularization <= 0:
            raise ValueError("l2_regularization must be positive")
        X = _as_csr(X)

        n, d = X.shape
        lam = float(self.l2_regularization)
        bias = float(self.bias_scale)
        sign = np.where(y, 1.0, -1.0)
        q = (np.asarray(X.multiply(X).sum(axis=1)).ravel() + bias * bias) / (lam * n)
        indptr, indices, data = X.indptr, X.indices, X.data

        alpha = np.zeros(n)
        w = np.zeros(d)
        b = 0.0  # weight of the constant bias feature
        rng = np.random.default_rng(self.random_state)

        gap = np.inf
        epoch = 0
        for epoch in range(1, self.max_iter + 1):
            for i in rng.permutation(n):
                cols = indices[indptr[i]:indptr[i + 1]]
                vals = data[indptr[i]:indptr[i + 1]]
                margin = sign[i] * (float(vals @ w[cols]) + b * bias)
                a = _dual_coordinate(alpha[i], margin, q[i], self.newton_steps)
                delta = a - alpha[i]
                if delta != 0.0:
                    alpha[i] = a
                    step = delta * sign[i] / (lam * n)
                    w[cols] += step * vals
                    b += step * bias

            reg = 0.5 * lam * (float(w @ w) + b * b)
            primal = float(np.mean(np.logaddexp(0.0, -sign * (X @ w + b * bias)))) + reg
            dual = float(np.mean(_entropy(alpha))) - reg
            gap = primal - dual
            log.debug("sdca epoch %d: primal=%.6f dual=%.6f gap=%.2e", epoch, primal, dual, gap)
            if gap < self.tol:
                break

        self.converged_ = bool(gap < self.tol)
        if not self.converged_:
            log.warning("sdca stopped after %d epochs with duality gap %.2e (tol=%.0e)",
                        epoch, gap, self.tol)
        self.coef_ = w
        self.intercept_ = float(b * bias)
        self.classes_ = np.array([False, True])
        self.n_features_in_ = d
        self.n_iter_ = epoch
        self.duality_gap_ = float(gap)
        return self

    def decision_function(self, X):
        check_is_fitted(self, "coef_")
        X = check_array(X, accept_sparse="csr", dtype=np.float64, ensure_min_features=0)
        if X.shape[1] != self.coef_.shape[0]:
            raise ValueError(f"expected {self.coef_.shape[0]} features, got {X.shape[1]}")
        return np.asarray(X @ self.coef_).ravel() + self.intercept_

    def predict_proba(self, X):
        p = expit(self.decision_function(X))
        return np.column_stack([1.0 - p, p])

    def predict(self, X):
        p = expit(self.decision_function(X))
        return self.classes_[(p >= 0.5).astype(int)]

    def predict_one(self, v) -> Prediction:
        if not sp.issparse(v):
            v = np.asarray(v, dtype=np.float64).reshape(1, -1)
        return to_prediction(float(self.decision_function(v)[0]))

    def predict_many(self, X) -> list[Prediction]:
        return [to_prediction(float(s)) for s in self.decision_function(X)]


def to_prediction(score: float) -> Prediction:
    probability = float(expit(score))
    return Prediction(predicted_label=probability >= 0.5, probability=probability, score=score)


def _as_csr(X) -> sp.csr_matrix:
    X = check_array(X, accept_sparse="csr", dtype=np.float64, ensure_min_features=0)
    if not sp.issparse(X):
        return sp.csr_matrix(X)
    if not X.has_canonical_format:
        X = X.copy()
        X.sum_duplicates()
    return X
