# tests/test_generate_data.py
import numpy as np
import pandas as pd

import scripts.generate_data as gd
from src.config import INTERESTS


def test_gen_profiles_shape_and_columns():
    df = gd.gen_profiles(200)
    assert df.shape[0] == 200
    expected_cols = {"gradyear", "gender", "age", "friends", *INTERESTS}
    assert set(df.columns) == expected_cols
    assert set(df["gradyear"]).issubset(set(gd.GRADYEARS))
    assert set(df["gender"].dropna()).issubset({"F", "M"})
    # interests are counts, never missing
    assert (df[INTERESTS] >= 0).all().all()
    assert not df[INTERESTS].isna().any().any()


def test_gen_profiles_plants_missing_and_outlying_ages():
    df = gd.gen_profiles(500, age_missing=0.2, age_outlier=0.1, gender_missing=0.2)
    assert df["age"].isna().any()
    assert df["gender"].isna().any()
    observed = df["age"].dropna()
    assert ((observed < 13) | (observed >= 20)).any()


def test_reproducibility_with_seed():
    gd.rng = np.random.default_rng(42)
    df1 = gd.gen_profiles(20)

    gd.rng = np.random.default_rng(42)
    df2 = gd.gen_profiles(20)

    pd.testing.assert_frame_equal(df1, df2)


def test_main_creates_csv(tmp_path):
    old_base = gd.BASE
    gd.BASE = tmp_path
    try:
        gd.main()
        fpath = tmp_path / "profiles.csv"
        assert fpath.exists()
        df = pd.read_csv(fpath)
        assert not df.empty
    finally:
        gd.BASE = old_base
