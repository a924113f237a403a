"""
Tests for the scikit-learn estimator interface.
"""

import numpy as np
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError

from kmedoids_pam.models import InvalidParameter, PrecomputedKMedoids


def test_fit_exposes_fitted_attributes(line_matrix):
    km = PrecomputedKMedoids(n_clusters=2, random_state=0).fit(line_matrix)

    assert km.medoid_indices_.shape == (2,)
    assert km.labels_.shape == (5,)
    assert set(km.labels_) == {0, 1}
    assert km.inertia_ == pytest.approx(km.cost_history_[-1])
    assert km.n_iter_ >= 1
    assert km.n_features_in_ == 5
    members = sorted(p for cluster in km.clusters_.values() for p in cluster)
    assert members == [0, 1, 2, 3, 4]


def test_labels_point_at_cluster_medoids(make_matrix):
    matrix = make_matrix(20, seed=0)
    km = PrecomputedKMedoids(n_clusters=3, random_state=1).fit(matrix)

    for position, medoid in enumerate(km.medoid_indices_):
        assert km.labels_[medoid] == position
        assert set(np.flatnonzero(km.labels_ == position)) == set(km.clusters_[medoid])


def test_fit_predict_returns_labels(line_matrix):
    km = PrecomputedKMedoids(n_clusters=2, random_state=0)
    labels = km.fit_predict(line_matrix)
    np.testing.assert_array_equal(labels, km.labels_)


def test_transform_and_predict(line_matrix):
    km = PrecomputedKMedoids(n_clusters=2, random_state=0).fit(line_matrix)

    distances = km.transform(line_matrix)
    assert distances.shape == (5, 2)
    np.testing.assert_array_equal(distances, line_matrix[:, km.medoid_indices_])
    np.testing.assert_array_equal(km.predict(line_matrix), np.argmin(distances, axis=1))


def test_predict_before_fit():
    with pytest.raises(NotFittedError):
        PrecomputedKMedoids().predict([[0.0, 1.0]])


def test_invalid_parameters_raise_on_fit(line_matrix):
    with pytest.raises(InvalidParameter):
        PrecomputedKMedoids(n_clusters=5).fit(line_matrix)
    with pytest.raises(InvalidParameter):
        PrecomputedKMedoids(start_prob=0.99, end_prob=0.9).fit(line_matrix)


def test_clone_keeps_params():
    km = PrecomputedKMedoids(n_clusters=4, max_iter=3, tol=0.5, random_state=2)
    params = clone(km).get_params()
    assert params['n_clusters'] == 4
    assert params['max_iter'] == 3
    assert params['tol'] == 0.5
    assert params['random_state'] == 2


def test_zero_max_iter(make_matrix):
    matrix = make_matrix(15, seed=4)
    km = PrecomputedKMedoids(n_clusters=3, max_iter=0, random_state=0).fit(matrix)
    assert km.n_iter_ == 0
    assert len(km.cost_history_) == 1


@pytest.mark.parametrize("n_columns", [4, 6])
def test_transform_rejects_wrong_column_count(line_matrix, n_columns):
    km = PrecomputedKMedoids(n_clusters=2, random_state=0).fit(line_matrix)
    with pytest.raises(ValueError, match="columns"):
        km.transform(np.zeros((2, n_columns)))
    with pytest.raises(ValueError, match="columns"):
        km.predict(np.zeros((2, n_columns)))
