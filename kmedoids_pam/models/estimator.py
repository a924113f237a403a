"""scikit-learn estimator interface to the k-medoids engine"""

import numpy as np
from sklearn.base import BaseEstimator, ClusterMixin, TransformerMixin
from sklearn.utils import check_array
from sklearn.utils.validation import check_is_fitted

from kmedoids_pam.models.kmedoids import KMedoids


class PrecomputedKMedoids(ClusterMixin, TransformerMixin, BaseEstimator):
    """k-medoids clustering of a precomputed distance matrix.

    Parameters
    ----------
    n_clusters : int, optional, default: 2
        The number of clusters to form as well as the number of medoids to
        generate.

    start_prob, end_prob : float, optional, default: 0.90, 0.99
        Seeding window, see :class:`KMedoids`.

    max_iter : int, optional, default: 10
        Maximum number of swap passes. It can be zero in which case only the
        initialization is computed.

    tol : float, optional, default: 0.01
        Stop once a pass improves the cost by no more than this.

    random_state : int, RandomState instance or None, optional
        Specify random state for the random number generator used to
        initialise medoids.

    n_jobs : int or None, optional
        Number of joblib workers used to evaluate swaps.

    Attributes
    ----------
    medoid_indices_ : array, shape = (n_clusters,)
        The indices of the medoid rows in X

    labels_ : array, shape = (n_samples,)
        Labels of each point. These come from round-robin assignment and may
        differ from ``predict(X)`` on the training matrix.

    inertia_ : float
        Configuration cost: per-cluster mean distance to the medoid, summed.

    clusters_ : dict
        Medoid index -> member indices.

    cost_history_ : list of float
        Cost after seeding, then after every accepted swap.

    n_iter_ : int
        Number of swap passes performed.

    Examples
    --------
    >>> from kmedoids_pam.models import PrecomputedKMedoids
    >>> import numpy as np
    >>> D = np.abs(np.subtract.outer(np.arange(5), np.arange(5)))
    >>> km = PrecomputedKMedoids(n_clusters=2, random_state=0).fit(D)
    >>> len(km.medoid_indices_)
    2
    """

    def __init__(
        self,
        n_clusters=2,
        start_prob=0.90,
        end_prob=0.99,
        max_iter=10,
        tol=0.01,
        random_state=None,
        n_jobs=None,
    ):
        self.n_clusters = n_clusters
        self.start_prob = start_prob
        self.end_prob = end_prob
        self.max_iter = max_iter
        self.tol = tol
        self.random_state = random_state
        self.n_jobs = n_jobs

    def fit(self, X, y=None):
        """Fit K-Medoids to the provided distance matrix.

        Parameters
        ----------
        X : array-like, shape = (n_samples, n_samples)
            Pairwise distances between the samples.

        y : Ignored

        Returns
        -------
        self
        """
        engine = KMedoids(
            X,
            n_clusters=self.n_clusters,
            start_prob=self.start_prob,
            end_prob=self.end_prob,
            random_state=self.random_state,
            n_jobs=self.n_jobs,
        )
        result = engine.run(max_iterations=self.max_iter, tolerance=self.tol)

        self.n_features_in_ = engine.n_points
        self.medoid_indices_ = np.asarray(result.medoids, dtype=int)
        self.labels_ = result.labels()
        self.inertia_ = result.cost
        self.clusters_ = result.clusters
        self.cost_history_ = list(result.cost_history)
        self.n_iter_ = result.n_iter
        return self

    def transform(self, X):
        """Distances from query samples to the medoids.

        Parameters
        ----------
        X : array-like, shape (n_query, n_samples)
            Distances from each query sample to every training sample.

        Returns
        -------
        X_new : array, shape = (n_query, n_clusters)
        """
        check_is_fitted(self, "medoid_indices_")
        X = check_array(X, dtype=[np.float64, np.float32])
        if X.shape[1] != self.n_features_in_:
            raise ValueError(
                "X has %d columns, but %s was fitted on %d samples."
                % (X.shape[1], self.__class__.__name__, self.n_features_in_)
            )
        return X[:, self.medoid_indices_]

    def predict(self, X):
        """Index of the closest medoid for each query sample."""
        return np.argmin(self.transform(X), axis=1)
