from __future__ import annotations
import json
import logging
import pandas as pd

from src.config import PROFILES_PATH, REPORT_PATH, DEFAULT_K, SEED, AGE_COL, FEMALE_COL, FRIENDS_COL, GROUP_COL, AGE_IMPUTED_COL
from src.features.preprocess import group_means
from src.features.profiling import top_interests
from src.pipeline import run_segmentation, SegmentationResult


def build_report(result: SegmentationResult, n_top: int = 5) -> dict:
    prof = result.profile
    tops = top_interests(result.centers, n_top)
    clusters = []
    for cid, row in prof.iterrows():
        clusters.append({
            "cluster": int(cid),
            "size": int(row["size"]),
            "mean_age": None if pd.isna(row[AGE_COL]) else round(float(row[AGE_COL]), 3),
            "female_share": None if pd.isna(row[FEMALE_COL]) else round(float(row[FEMALE_COL]), 3),
            "mean_friends": None if pd.isna(row[FRIENDS_COL]) else round(float(row[FRIENDS_COL]), 3),
            "top_interests": tops.get(int(cid), []),
            "centroid": [round(float(v), 4) for v in result.centers.loc[cid]],
        })
    km = result.kmeans
    return {
        "n_profiles": int(len(result.table)),
        "k": int(len(prof)),
        "converged": result.converged,
        "n_iter": int(km.n_iter_),
        "inertia": round(float(km.inertia_), 4),
        "features": list(result.centers.columns),
        "missing_before": {col: int(v) for col, v in result.missing_before["missing"].items()},
        "missing_after": {col: int(v) for col, v in result.missing_after["missing"].items()},
        "clusters": clusters,
    }


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    df = pd.read_csv(PROFILES_PATH)
    result = run_segmentation(df, k=DEFAULT_K, seed=SEED)
    report = build_report(result)

    print("Average age by graduation year (observed ages):")
    print(group_means(result.table[AGE_COL].where(~result.table[AGE_IMPUTED_COL]), result.table[GROUP_COL]).round(2).to_string())
    print("\nSegment profile:")
    print(result.profile.round(3).to_string())
    print("\nCluster centers (z-scores):")
    print(result.centers.round(2).to_string())

    REPORT_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(REPORT_PATH, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return report


if __name__ == "__main__":
    main()
