import logging

import numpy as np
from sklearn.metrics import silhouette_score

logger = logging.getLogger(__name__)


def _compute_inertia(distances):
    """Compute inertia of samples. Inertia is defined as the sum of the
    sample distances to closest cluster centers.

    Parameters
    ----------
    distances : array-like, shape=(n_samples, n_clusters)
        Distances to cluster centers.

    Returns
    -------
    Sum of sample distances to closest cluster centers.
    """
    return float(np.sum(np.min(distances, axis=1)))


def count_not_nearest(distance_matrix, result):
    """
    Count points whose cluster medoid is strictly farther than their nearest medoid.

    Args:
        distance_matrix: Square distance matrix the result was computed on
        result: KMedoidsResult

    Returns:
        int: Number of points the round-robin assignment kept from their nearest medoid
    """
    distances = np.asarray(distance_matrix)[:, list(result.medoids)]
    labels = result.labels()
    assigned = distances[np.arange(distances.shape[0]), labels]
    return int(np.sum(assigned > distances.min(axis=1)))


def compute_clustering_metrics(distance_matrix, result):
    """
    Compute quality metrics for a clustering result.

    Args:
        distance_matrix: Square distance matrix the result was computed on
        result: KMedoidsResult

    Returns:
        Dictionary with the configuration cost, the nearest-medoid inertia,
        the silhouette score (None when undefined), cluster sizes and the
        number of points not assigned to their nearest medoid
    """
    distance_matrix = np.asarray(distance_matrix, dtype=np.float64)
    n_points = distance_matrix.shape[0]
    labels = result.labels()
    n_labels = len(result.medoids)

    silhouette = None
    zero_diagonal = np.all(np.abs(np.diag(distance_matrix)) <= np.finfo(np.float64).eps * 100)
    if 2 <= n_labels <= n_points - 1 and zero_diagonal:
        silhouette = float(silhouette_score(distance_matrix, labels, metric="precomputed"))
    else:
        logger.info("Silhouette score undefined for this configuration")

    return {
        'configuration_cost': result.cost,
        'inertia': _compute_inertia(distance_matrix[:, list(result.medoids)]),
        'silhouette': silhouette,
        'cluster_sizes': {medoid: len(members) for medoid, members in result.clusters.items()},
        'n_not_nearest': count_not_nearest(distance_matrix, result)
    }
