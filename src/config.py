from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = ROOT / "data"
ARTIFACTS_DIR = ROOT / "artifacts"

PROFILES_PATH = DATA_DIR / "profiles.csv"
SEGMENTED_PATH = DATA_DIR / "profiles_segmented.csv"
SEGMENT_MODEL_PATH = ARTIFACTS_DIR / "kmeans_segments.joblib"
SCALER_PATH = ARTIFACTS_DIR / "interest_scaler.joblib"
REPORT_PATH = ARTIFACTS_DIR / "segment_report.json"

GROUP_COL = "gradyear"
GENDER_COL = "gender"
AGE_COL = "age"
FRIENDS_COL = "friends"
CLUSTER_COL = "cluster"

# derived columns appended by the pipeline
FEMALE_COL = "female"
NO_GENDER_COL = "no_gender"
AVE_AGE_COL = "ave_age"
AGE_IMPUTED_COL = "age_imputed"
FEMALE_VALUE = "F"

INTERESTS = [
    "basketball", "football", "soccer", "softball", "volleyball", "swimming",
    "cheerleading", "baseball", "tennis", "sports", "cute", "sex", "sexy",
    "hot", "kissed", "dance", "band", "marching", "music", "rock", "god",
    "church", "jesus", "bible", "hair", "dress", "blonde", "mall", "shopping",
    "clothes", "hollister", "abercrombie", "die", "death", "drunk", "drugs",
]

# valid teenage age window, [lo, hi)
AGE_RANGE = (13, 20)

DEFAULT_K = 5
SEED = 2345
MAX_ITER = 300
