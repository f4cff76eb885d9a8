from __future__ import annotations
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from ..config import CLUSTER_COL, INTERESTS
from ..errors import InvalidInputError


def profile_clusters(labels, aux: pd.DataFrame, clusters: Iterable[int] | None = None) -> pd.DataFrame:
    """Size and mean of each aux column per cluster; NaNs are skipped column by column."""
    labels = np.asarray(labels)
    if len(labels) != len(aux):
        raise InvalidInputError(f"labels ({len(labels)}) and aux ({len(aux)}) differ in length")
    try:
        values = aux.astype(float)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"auxiliary columns must be numeric: {exc}") from exc
    grouped = values.groupby(labels)
    out = grouped.mean()
    out.insert(0, "size", grouped.size())
    if clusters is not None:
        out = out.reindex(list(clusters))
        out["size"] = out["size"].fillna(0)
    out["size"] = out["size"].astype(int)
    out.index.name = CLUSTER_COL
    return out


def centroid_table(kmeans, feature_names: Sequence[str] | None = None) -> pd.DataFrame:
    centers = np.asarray(kmeans.cluster_centers_)
    if feature_names is None:
        feature_names = getattr(kmeans, "feature_names_in_", INTERESTS)
    feature_names = list(feature_names)
    if len(feature_names) != centers.shape[1]:
        raise InvalidInputError(
            f"{len(feature_names)} feature names for {centers.shape[1]} centroid coordinates"
        )
    index = pd.RangeIndex(1, centers.shape[0] + 1, name=CLUSTER_COL)
    return pd.DataFrame(centers, index=index, columns=feature_names)


def top_interests(centers: pd.DataFrame, n: int = 5) -> dict:
    return {int(cid): row.nlargest(n).index.tolist() for cid, row in centers.iterrows()}
