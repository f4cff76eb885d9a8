from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from .config import (
    AGE_COL,
    AGE_IMPUTED_COL,
    AGE_RANGE,
    AVE_AGE_COL,
    CLUSTER_COL,
    DEFAULT_K,
    FEMALE_COL,
    FRIENDS_COL,
    GENDER_COL,
    GROUP_COL,
    INTERESTS,
    MAX_ITER,
    NO_GENDER_COL,
    SEED,
)
from .errors import InvalidInputError
from .features.preprocess import gender_dummies, impute_group_mean, missing_summary, normalize_range
from .features.profiling import centroid_table, profile_clusters
from .features.segment_clustering import LloydKMeans, fit_kmeans_segments
from .features.standardize import ZScoreStandardizer

logger = logging.getLogger(__name__)


@dataclass
class SegmentationResult:
    table: pd.DataFrame
    standardizer: ZScoreStandardizer
    kmeans: LloydKMeans
    centers: pd.DataFrame
    profile: pd.DataFrame
    missing_before: pd.DataFrame
    missing_after: pd.DataFrame

    @property
    def converged(self) -> bool:
        return bool(self.kmeans.converged_)


def prepare_profiles(df: pd.DataFrame, age_range=AGE_RANGE, on_empty_group: str = "propagate") -> pd.DataFrame:
    """Clean age, add gender indicators and impute age by cohort on a copy of ``df``."""
    table = df.copy()
    table[AGE_COL] = normalize_range(table[AGE_COL], *age_range)
    dummies = gender_dummies(table)
    table[FEMALE_COL] = dummies[FEMALE_COL]
    table[NO_GENDER_COL] = dummies[NO_GENDER_COL]

    imputation = impute_group_mean(table[AGE_COL], table[GROUP_COL], on_empty=on_empty_group)
    table[AVE_AGE_COL] = table[GROUP_COL].map(imputation.means)
    table[AGE_IMPUTED_COL] = imputation.filled
    table[AGE_COL] = imputation.imputed
    return table


def run_segmentation(
    df: pd.DataFrame,
    k: int = DEFAULT_K,
    seed=SEED,
    features: Sequence[str] = INTERESTS,
    age_range=AGE_RANGE,
    on_empty_group: str = "propagate",
    max_iter: int = MAX_ITER,
    n_init: int = 1,
    init: str = "random",
) -> SegmentationResult:
    features = list(features)
    required = [GROUP_COL, GENDER_COL, AGE_COL, FRIENDS_COL, *features]
    absent = [c for c in required if c not in df.columns]
    if absent:
        raise InvalidInputError(f"input table lacks column(s): {absent}")
    if df.empty:
        raise InvalidInputError("input table has no rows")

    missing_before = missing_summary(df, [AGE_COL, GENDER_COL])
    table = prepare_profiles(df, age_range=age_range, on_empty_group=on_empty_group)
    missing_after = missing_summary(table, [AGE_COL])

    scaler, kmeans = fit_kmeans_segments(
        table, k=k, seed=seed, features=features,
        max_iter=max_iter, n_init=n_init, init=init,
    )
    table[CLUSTER_COL] = kmeans.labels_ + 1

    profile = profile_clusters(
        table[CLUSTER_COL], table[[AGE_COL, FEMALE_COL, FRIENDS_COL]], clusters=range(1, k + 1)
    )
    centers = centroid_table(kmeans, features)
    logger.info("segmented %d profiles into %d clusters (converged=%s)", len(table), k, kmeans.converged_)
    return SegmentationResult(
        table=table,
        standardizer=scaler,
        kmeans=kmeans,
        centers=centers,
        profile=profile,
        missing_before=missing_before,
        missing_after=missing_after,
    )
