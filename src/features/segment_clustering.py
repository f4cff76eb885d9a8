from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import joblib
import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, ClusterMixin
from sklearn.exceptions import ConvergenceWarning
from sklearn.utils.validation import check_is_fitted

from ..config import CLUSTER_COL, DEFAULT_K, INTERESTS, MAX_ITER, SEED
from ..errors import InvalidClusterCountError, InvalidInputError, InvalidParameterError
from .preprocess import select_interest_features
from .standardize import ZScoreStandardizer, check_finite_matrix

logger = logging.getLogger(__name__)

INIT_METHODS = ("random", "k-means++")


def _as_generator(random_state) -> np.random.Generator:
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def _sq_distances(X: np.ndarray, centers: np.ndarray) -> np.ndarray:
    diff = X[:, None, :] - centers[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def _init_random(X, k, rng):
    return X[rng.choice(X.shape[0], size=k, replace=False)].copy()


def _init_kmeanspp(X, k, rng):
    n = X.shape[0]
    centers = np.empty((k, X.shape[1]))
    centers[0] = X[rng.integers(n)]
    closest = _sq_distances(X, centers[:1])[:, 0]
    for c in range(1, k):
        total = closest.sum()
        # every row already sits on a chosen center
        idx = rng.integers(n) if total <= 0 else rng.choice(n, p=closest / total)
        centers[c] = X[idx]
        closest = np.minimum(closest, _sq_distances(X, centers[c:c + 1])[:, 0])
    return centers


def _update_centers(X, labels, centers, own_dist):
    """Member means; an empty cluster takes the row farthest from its own centroid."""
    k = centers.shape[0]
    new = centers.copy()
    empty = []
    for j in range(k):
        members = X[labels == j]
        if len(members):
            new[j] = members.mean(axis=0)
        else:
            empty.append(j)
    if empty:
        # farthest first, ties to the lowest row index
        order = np.argsort(-own_dist, kind="stable")
        for j, row in zip(empty, order):
            new[j] = X[row]
        logger.debug("reseeded empty cluster(s) %s", empty)
    return new


@dataclass
class _Run:
    labels: np.ndarray
    centers: np.ndarray
    inertia: float
    history: list
    n_iter: int
    converged: bool


def _lloyd(X, centers, max_iter) -> _Run:
    n = X.shape[0]
    rows = np.arange(n)
    labels = None
    history = []
    converged = False
    n_iter = 0
    while n_iter < max_iter:
        n_iter += 1
        dist = _sq_distances(X, centers)
        new_labels = dist.argmin(axis=1)
        own = dist[rows, new_labels]
        history.append(float(own.sum()))
        if labels is not None and np.array_equal(labels, new_labels):
            converged = True
            break
        labels = new_labels
        centers = _update_centers(X, labels, centers, own)
    dist = _sq_distances(X, centers)
    if not converged:
        # centers moved after the last assignment; labels must follow them
        labels = dist.argmin(axis=1)
    inertia = float(dist[rows, labels].sum())
    return _Run(labels, centers, inertia, history, n_iter, converged)


class LloydKMeans(ClusterMixin, BaseEstimator):
    """
    Lloyd k-means; ties go to the lowest cluster index, empty clusters are reseeded
    onto the farthest row. random_state: int, None or a consumed np.random.Generator.
    """

    def __init__(self, n_clusters: int = DEFAULT_K, max_iter: int = MAX_ITER,
                 n_init: int = 1, init: str = "random", random_state=None):
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.n_init = n_init
        self.init = init
        self.random_state = random_state

    def _check_params(self, n_samples: int):
        k = self.n_clusters
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or not 1 <= k <= n_samples:
            raise InvalidClusterCountError(k, n_samples)
        if self.max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.n_init < 1:
            raise InvalidParameterError(f"n_init must be >= 1, got {self.n_init}")
        if self.init not in INIT_METHODS:
            raise InvalidParameterError(f"init must be one of {INIT_METHODS}, got {self.init!r}")

    def fit(self, X, y=None):
        X = check_finite_matrix(X, "clustering input")
        self._check_params(X.shape[0])
        k = int(self.n_clusters)
        rng = _as_generator(self.random_state)
        seed_centers = _init_random if self.init == "random" else _init_kmeanspp

        best = None
        for _ in range(self.n_init):
            run = _lloyd(X, seed_centers(X, k, rng), self.max_iter)
            if best is None or run.inertia < best.inertia:
                best = run

        self.labels_ = best.labels
        self.cluster_centers_ = best.centers
        self.counts_ = np.bincount(best.labels, minlength=k)
        self.inertia_ = best.inertia
        self.inertia_history_ = best.history
        self.n_iter_ = best.n_iter
        self.converged_ = best.converged
        self.n_features_in_ = X.shape[1]
        if not best.converged:
            warnings.warn(
                f"k-means stopped at max_iter={self.max_iter} before the assignment settled",
                ConvergenceWarning,
                stacklevel=2,
            )
        logger.info("k-means k=%d: inertia=%.4f after %d iteration(s), sizes=%s",
                    k, self.inertia_, self.n_iter_, self.counts_.tolist())
        return self

    def predict(self, X) -> np.ndarray:
        check_is_fitted(self, "cluster_centers_")
        X = check_finite_matrix(X, "clustering input")
        if X.shape[1] != self.n_features_in_:
            raise InvalidInputError(f"expected {self.n_features_in_} columns, got {X.shape[1]}")
        return _sq_distances(X, self.cluster_centers_).argmin(axis=1)


def fit_kmeans_segments(df: pd.DataFrame, k: int = DEFAULT_K, seed=SEED,
                        features: Sequence[str] = INTERESTS, **kmeans_params):
    scaler = ZScoreStandardizer()
    Z = scaler.fit_transform(select_interest_features(df, features))
    kmeans = LloydKMeans(n_clusters=k, random_state=seed, **kmeans_params).fit(Z)
    return scaler, kmeans


def assign_segments(df: pd.DataFrame, scaler, kmeans) -> pd.DataFrame:
    features = list(getattr(scaler, "feature_names_in_", INTERESTS))
    Z = scaler.transform(select_interest_features(df, features))
    out = df.copy()
    out[CLUSTER_COL] = kmeans.predict(Z) + 1
    return out


def save(scaler, kmeans, scaler_path: Path, model_path: Path) -> None:
    scaler_path.parent.mkdir(parents=True, exist_ok=True)
    model_path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(scaler, scaler_path)
    joblib.dump(kmeans, model_path)


def load(scaler_path: Path, model_path: Path):
    scaler = joblib.load(scaler_path)
    km = joblib.load(model_path)
    return scaler, km
