from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, field
from typing import Hashable, Sequence

import numpy as np
import pandas as pd

from ..config import (
    AGE_RANGE,
    GENDER_COL,
    FEMALE_COL,
    NO_GENDER_COL,
    FEMALE_VALUE,
    INTERESTS,
)
from ..errors import (
    EmptyGroupMeanError,
    EmptyGroupMeanWarning,
    InvalidInputError,
    InvalidParameterError,
)

logger = logging.getLogger(__name__)

ON_EMPTY_POLICIES = ("propagate", "raise")


def normalize_range(values, lo: float = AGE_RANGE[0], hi: float = AGE_RANGE[1]) -> pd.Series:
    """Keep values inside [lo, hi); everything else (including non-numeric) becomes NaN."""
    if lo >= hi:
        raise InvalidParameterError(f"empty range [{lo}, {hi})")
    s = pd.to_numeric(pd.Series(values), errors="coerce").astype(float)
    in_range = (s >= lo) & (s < hi)
    out = s.where(in_range)
    dropped = int(out.isna().sum() - s.isna().sum())
    if dropped:
        logger.debug("normalize_range: %d value(s) outside [%s, %s) marked missing", dropped, lo, hi)
    return out


def indicator_columns(values, target, target_col: str, missing_col: str) -> pd.DataFrame:
    """target_col marks value == target, missing_col marks missing; other categories are (0, 0)."""
    s = pd.Series(values)
    missing = s.isna()
    hit = s.eq(target) & ~missing
    return pd.DataFrame(
        {target_col: hit.astype(int), missing_col: missing.astype(int)},
        index=s.index,
    )


def gender_dummies(df: pd.DataFrame) -> pd.DataFrame:
    return indicator_columns(df[GENDER_COL], FEMALE_VALUE, FEMALE_COL, NO_GENDER_COL)


@dataclass
class GroupMeanImputation:
    imputed: pd.Series
    means: pd.Series
    filled: pd.Series
    empty_groups: list = field(default_factory=list)


def _group_totals(values: pd.Series, groups: pd.Series) -> dict:
    # pass 1: group -> (sum, count) over observed values; missing keys collect under None
    totals: dict[Hashable, tuple[float, int]] = {}
    for v, g in zip(values, groups):
        if pd.isna(g):
            if pd.isna(v):
                totals.setdefault(None, (0.0, 0))
            continue
        total, count = totals.get(g, (0.0, 0))
        if not pd.isna(v):
            total += float(v)
            count += 1
        totals[g] = (total, count)
    return totals


def _aligned(values, groups) -> tuple[pd.Series, pd.Series]:
    values = pd.Series(values)
    groups = pd.Series(groups)
    if len(values) != len(groups):
        raise InvalidInputError(
            f"values ({len(values)}) and groups ({len(groups)}) differ in length"
        )
    return values, groups


def _means(totals: dict) -> pd.Series:
    return pd.Series(
        {g: (total / count if count else np.nan) for g, (total, count) in totals.items() if g is not None},
        dtype=float,
    )


def group_means(values, groups) -> pd.Series:
    values, groups = _aligned(values, groups)
    return _means(_group_totals(values, groups))


def impute_group_mean(values, groups, on_empty: str = "propagate") -> GroupMeanImputation:
    """
    Fill missing values with their group mean. Groups without observed values (and
    rows with a missing key, reported as None) warn and stay NaN, or raise.
    """
    if on_empty not in ON_EMPTY_POLICIES:
        raise InvalidParameterError(f"on_empty must be one of {ON_EMPTY_POLICIES}, got {on_empty!r}")
    values, groups = _aligned(values, groups)
    totals = _group_totals(values, groups)

    empty_groups = [g for g, (_, count) in totals.items() if count == 0]
    if empty_groups:
        if on_empty == "raise":
            raise EmptyGroupMeanError(empty_groups)
        warnings.warn(
            f"no observed values in groups {empty_groups}; their missing entries stay missing",
            EmptyGroupMeanWarning,
            stacklevel=2,
        )

    # pass 2: substitute row by row in the original order
    imputed, filled = [], []
    for v, g in zip(values, groups):
        if not pd.isna(v):
            imputed.append(float(v))
            filled.append(False)
            continue
        total, count = (0.0, 0) if pd.isna(g) else totals[g]
        if count:
            imputed.append(total / count)
            filled.append(True)
        else:
            imputed.append(np.nan)
            filled.append(False)

    logger.info("impute_group_mean: filled %d of %d missing value(s)", sum(filled), int(values.isna().sum()))
    return GroupMeanImputation(
        imputed=pd.Series(imputed, index=values.index, name=values.name, dtype=float),
        means=_means(totals),
        filled=pd.Series(filled, index=values.index, dtype=bool),
        empty_groups=empty_groups,
    )


def select_interest_features(df: pd.DataFrame, columns: Sequence[str] = INTERESTS) -> pd.DataFrame:
    columns = list(columns)
    absent = [c for c in columns if c not in df.columns]
    if absent:
        raise InvalidInputError(f"missing feature columns: {absent}")
    out = df[columns].apply(pd.to_numeric, errors="coerce").astype(float)
    holes = out.columns[out.isna().any()].tolist()
    if holes:
        raise InvalidInputError(f"feature columns contain missing values: {holes}")
    return out


def missing_summary(df: pd.DataFrame, columns: Sequence[str] | None = None) -> pd.DataFrame:
    cols = list(df.columns) if columns is None else list(columns)
    counts = df[cols].isna().sum()
    share = counts / len(df) if len(df) else counts.astype(float)
    return pd.DataFrame({"missing": counts.astype(int), "missing_pct": (share * 100).round(2)})
