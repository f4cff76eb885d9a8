import numpy as np
import pandas as pd
import pytest

from src.config import INTERESTS
from src.errors import EmptyGroupMeanError, EmptyGroupMeanWarning, InvalidInputError, InvalidParameterError
from src.features.preprocess import (
    normalize_range,
    indicator_columns,
    gender_dummies,
    impute_group_mean,
    group_means,
    select_interest_features,
    missing_summary,
)


def test_normalize_range_keeps_in_range_and_drops_the_rest():
    s = pd.Series([12.99, 13, 15.5, 19.999, 20, 106.927, np.nan, "x"], index=list("abcdefgh"))
    out = normalize_range(s, 13, 20)
    assert list(out.index) == list("abcdefgh")
    assert out[["b", "c", "d"]].tolist() == [13.0, 15.5, 19.999]
    assert out[["a", "e", "f", "g", "h"]].isna().all()
    # input untouched
    assert s["f"] == 106.927


def test_normalize_range_rejects_empty_range():
    with pytest.raises(InvalidParameterError):
        normalize_range([1, 2, 3], 5, 5)


def test_indicator_columns_partition_three_states():
    df = pd.DataFrame({"gender": ["F", "M", None, "F", np.nan, "M"]})
    dummies = gender_dummies(df)
    assert dummies["female"].tolist() == [1, 0, 0, 1, 0, 0]
    assert dummies["no_gender"].tolist() == [0, 0, 1, 0, 1, 0]
    states = list(zip(dummies["female"], dummies["no_gender"]))
    # (1,1) never occurs; every row lands in exactly one of the three states
    assert (1, 1) not in states
    assert sum(s == (1, 0) for s in states) == 2
    assert sum(s == (0, 1) for s in states) == 2
    assert sum(s == (0, 0) for s in states) == 2


def test_indicator_columns_custom_names_keep_index():
    s = pd.Series(["yes", None, "no"], index=[10, 11, 12])
    out = indicator_columns(s, "yes", "is_yes", "is_na")
    assert list(out.columns) == ["is_yes", "is_na"]
    assert list(out.index) == [10, 11, 12]


def test_impute_group_mean_fills_with_group_average():
    values = pd.Series([10.0, np.nan, 20.0, 5.0, np.nan])
    groups = pd.Series(["a", "a", "a", "b", "b"])
    res = impute_group_mean(values, groups)
    assert res.imputed.tolist() == [10.0, 15.0, 20.0, 5.0, 5.0]
    assert res.filled.tolist() == [False, True, False, False, True]
    assert res.empty_groups == []
    assert res.means.to_dict() == {"a": 15.0, "b": 5.0}
    # observed values unchanged, input not mutated
    assert np.isnan(values[1])


def test_impute_group_mean_matches_groupby_on_random_data():
    rng = np.random.default_rng(7)
    values = pd.Series(rng.uniform(13, 20, 200))
    values[rng.random(200) < 0.2] = np.nan
    groups = pd.Series(rng.choice([2006, 2007, 2008, 2009], 200))
    expected = values.groupby(groups).mean()
    res = impute_group_mean(values, groups)
    assert not res.imputed.isna().any()
    for i in np.flatnonzero(values.isna()):
        assert res.imputed[i] == pytest.approx(expected[groups[i]], abs=1e-9)


def test_empty_group_propagates_missing_with_warning():
    values = [10.0, np.nan, np.nan]
    groups = ["a", "a", "c"]
    with pytest.warns(EmptyGroupMeanWarning):
        res = impute_group_mean(values, groups)
    assert res.empty_groups == ["c"]
    assert res.imputed[1] == 10.0
    assert np.isnan(res.imputed[2])
    assert np.isnan(res.means["c"])
    assert not res.filled[2]


def test_empty_group_can_raise():
    with pytest.raises(EmptyGroupMeanError) as exc:
        impute_group_mean([1.0, np.nan], ["a", "b"], on_empty="raise")
    assert exc.value.groups == ["b"]


def test_missing_group_key_is_not_imputed():
    with pytest.warns(EmptyGroupMeanWarning):
        res = impute_group_mean([np.nan, 10.0], [np.nan, 2006])
    assert res.empty_groups == [None]
    assert np.isnan(res.imputed[0])
    assert None not in res.means.index


def test_impute_group_mean_validates_inputs():
    with pytest.raises(InvalidInputError):
        impute_group_mean([1.0, 2.0], ["a"])
    with pytest.raises(InvalidParameterError):
        impute_group_mean([1.0], ["a"], on_empty="zero")


def test_group_means_reports_empty_as_nan():
    means = group_means([14.0, 16.0, np.nan], [2008, 2008, 2009])
    assert means[2008] == 15.0
    assert np.isnan(means[2009])


def test_select_interest_features_checks_columns_and_holes():
    df = pd.DataFrame({kw: [0, 1] for kw in INTERESTS})
    X = select_interest_features(df)
    assert list(X.columns) == INTERESTS and X.dtypes.eq(float).all()

    with pytest.raises(InvalidInputError):
        select_interest_features(df.drop(columns=["drugs"]))
    df.loc[0, "music"] = np.nan
    with pytest.raises(InvalidInputError):
        select_interest_features(df)


def test_missing_summary_counts():
    df = pd.DataFrame({"age": [1.0, np.nan, np.nan, 4.0], "gender": ["F", None, "M", "F"]})
    out = missing_summary(df)
    assert out.loc["age", "missing"] == 2
    assert out.loc["gender", "missing"] == 1
    assert out.loc["age", "missing_pct"] == 50.0
