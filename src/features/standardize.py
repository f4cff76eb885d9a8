from __future__ import annotations
import logging
import warnings

import numpy as np
from sklearn.preprocessing import StandardScaler
from sklearn.utils.validation import check_is_fitted

from ..errors import DegenerateVarianceWarning, InvalidInputError

logger = logging.getLogger(__name__)


def check_finite_matrix(X, what: str = "input") -> np.ndarray:
    """Return X as a 2-D float array; reject empty, ragged or non-finite input."""
    try:
        arr = np.array(X, dtype=float, copy=True)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{what} is not numeric: {exc}") from exc
    if arr.ndim != 2:
        raise InvalidInputError(f"{what} must be 2-D, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidInputError(f"{what} is empty (shape {arr.shape})")
    if not np.isfinite(arr).all():
        raise InvalidInputError(f"{what} contains missing or non-finite entries")
    return arr


class ZScoreStandardizer(StandardScaler):
    """
    StandardScaler (population std) that flags constant columns in ``degenerate_``,
    warns about them and always maps them to exactly 0.
    """

    def fit(self, X, y=None, sample_weight=None):
        arr = check_finite_matrix(X, "standardizer input")
        super().fit(X, y, sample_weight=sample_weight)
        # StandardScaler leaves scale_ at 1.0 for the columns it judges constant
        self.degenerate_ = (self.scale_ == 1.0) & (np.sqrt(self.var_) != 1.0)
        if self.degenerate_.any():
            names = self._names()[self.degenerate_].tolist()
            warnings.warn(
                f"zero variance in column(s) {names}; they standardize to 0",
                DegenerateVarianceWarning,
                stacklevel=2,
            )
        logger.debug("fitted standardizer on %d x %d matrix", *arr.shape)
        return self

    def transform(self, X, copy=None):
        check_is_fitted(self, "degenerate_")
        arr = check_finite_matrix(X, "standardizer input")
        if arr.shape[1] != self.n_features_in_:
            raise InvalidInputError(
                f"expected {self.n_features_in_} columns, got {arr.shape[1]}"
            )
        Z = np.asarray(super().transform(X, copy=copy), dtype=float)
        Z[:, self.degenerate_] = 0.0
        return Z

    def _names(self) -> np.ndarray:
        if hasattr(self, "feature_names_in_"):
            return self.feature_names_in_
        return np.array([f"x{i}" for i in range(self.n_features_in_)], dtype=object)


def standardize(X) -> np.ndarray:
    return ZScoreStandardizer().fit_transform(X)
