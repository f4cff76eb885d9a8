from __future__ import annotations
import logging
import pandas as pd
from src.config import PROFILES_PATH, SEGMENTED_PATH, SCALER_PATH, SEGMENT_MODEL_PATH, DEFAULT_K, SEED
from src.pipeline import run_segmentation
from src.features.segment_clustering import save

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    df = pd.read_csv(PROFILES_PATH)
    result = run_segmentation(df, k=DEFAULT_K, seed=SEED)
    save(result.standardizer, result.kmeans, SCALER_PATH, SEGMENT_MODEL_PATH)
    SEGMENTED_PATH.parent.mkdir(parents=True, exist_ok=True)
    result.table.to_csv(SEGMENTED_PATH, index=False)
    print(f"Saved {DEFAULT_K} segments to artifacts (converged={result.converged}).")
    return result

if __name__ == "__main__":
    main()
