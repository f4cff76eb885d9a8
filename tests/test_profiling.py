import numpy as np
import pandas as pd
import pytest

from src.errors import InvalidInputError
from src.features.profiling import profile_clusters, centroid_table, top_interests


def _aux():
    return pd.DataFrame({
        "age": [15.0, 17.0, np.nan, 18.0, 16.0],
        "female": [1, 0, 1, 1, 0],
        "friends": [10, 20, 30, 40, 50],
    })


def test_profile_sizes_and_means():
    labels = [1, 1, 2, 2, 2]
    aux = _aux()
    prof = profile_clusters(labels, aux)
    assert prof.index.name == "cluster"
    assert prof["size"].sum() == len(aux)
    assert prof.loc[1, "size"] == 2 and prof.loc[2, "size"] == 3
    assert prof.loc[1, "age"] == pytest.approx(16.0)
    # the missing age is skipped, not counted as zero
    assert prof.loc[2, "age"] == pytest.approx(17.0)
    assert prof.loc[2, "female"] == pytest.approx(2 / 3)
    assert prof.loc[2, "friends"] == pytest.approx(40.0)


def test_profile_matches_manual_means_on_random_data():
    rng = np.random.default_rng(0)
    labels = rng.integers(1, 5, 300)
    aux = pd.DataFrame({"age": rng.uniform(13, 20, 300), "friends": rng.poisson(30, 300)})
    prof = profile_clusters(labels, aux)
    assert prof["size"].sum() == 300
    for cid in prof.index:
        members = aux[labels == cid]
        assert prof.loc[cid, "age"] == pytest.approx(members["age"].mean())
        assert prof.loc[cid, "friends"] == pytest.approx(members["friends"].mean())


def test_profile_keeps_declared_empty_clusters():
    prof = profile_clusters([1, 1, 3, 3, 3], _aux(), clusters=range(1, 4))
    assert prof.index.tolist() == [1, 2, 3]
    assert prof.loc[2, "size"] == 0
    assert prof.loc[2, ["age", "female", "friends"]].isna().all()


def test_profile_does_not_mutate_and_checks_length():
    aux = _aux()
    before = aux.copy()
    profile_clusters(np.array([1, 2, 1, 2, 1]), aux)
    pd.testing.assert_frame_equal(aux, before)
    with pytest.raises(InvalidInputError):
        profile_clusters([1, 2], aux)


class _FakeKMeans:
    cluster_centers_ = np.array([[2.0, -0.1, 0.5], [-0.2, 1.5, 0.9]])


def test_centroid_table_and_top_interests():
    centers = centroid_table(_FakeKMeans(), ["basketball", "shopping", "music"])
    assert centers.index.tolist() == [1, 2]
    assert centers.loc[2, "shopping"] == 1.5
    tops = top_interests(centers, n=2)
    assert tops == {1: ["basketball", "music"], 2: ["shopping", "music"]}

    with pytest.raises(InvalidInputError):
        centroid_table(_FakeKMeans(), ["basketball"])


def test_profile_rejects_non_numeric_aux():
    aux = _aux().assign(gender=["F", "M", "F", "F", "M"])
    with pytest.raises(InvalidInputError):
        profile_clusters([1, 1, 2, 2, 2], aux)
