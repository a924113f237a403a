import numpy as np
import pytest
from scipy.spatial.distance import pdist, squareform


@pytest.fixture
def line_matrix():
    """Five points on a line, d(i, j) = |i - j|."""
    return np.abs(np.subtract.outer(np.arange(5), np.arange(5))).astype(float)


@pytest.fixture
def make_matrix():
    """Factory for Euclidean distance matrices over random 3-D points."""

    def _make(n_points, seed=0):
        rng = np.random.RandomState(seed)
        return squareform(pdist(rng.rand(n_points, 3)))

    return _make
