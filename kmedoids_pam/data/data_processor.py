"""
Distance matrix construction from feature vectors.
"""

import numpy as np
import logging
from sklearn.preprocessing import StandardScaler
from sklearn.metrics import pairwise_distances

from kmedoids_pam.config.settings import CLUSTERING_CONFIG, VALIDATION_CONFIG


class DistanceMatrixBuilder:
    """Turns a feature table into a symmetric, zero-diagonal distance matrix."""

    def __init__(self, metric: str = CLUSTERING_CONFIG['default_distance'], standardize: bool = False):
        """
        Initialize the builder.

        Args:
            metric: 'correlation' or any metric accepted by sklearn pairwise_distances
            standardize: Whether to standardize each feature before computing distances
        """
        self.metric = metric
        self.standardize = standardize
        self.logger = logging.getLogger(__name__)

    def build(self, features: np.ndarray) -> np.ndarray:
        """
        Compute pairwise distances between the rows of a feature table.

        Args:
            features: Array of shape (n_points, n_features)

        Returns:
            Distance matrix of shape (n_points, n_points)
        """
        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise ValueError(f"Features must be a 2-D array, got shape {features.shape}")

        if self.standardize:
            features = StandardScaler().fit_transform(features)

        if self.metric == 'correlation':
            distances = 1 - np.corrcoef(features, rowvar=True)
            if np.isnan(distances).any():
                if not VALIDATION_CONFIG['handle_nan_values']:
                    raise ValueError("Correlation distance undefined for constant feature rows")
                # constant rows have no correlation; treat them as uncorrelated
                self.logger.warning("Constant feature rows found, setting their correlation distance to 1")
                distances = np.nan_to_num(distances, nan=1.0)
        else:
            distances = pairwise_distances(features, metric=self.metric)

        distances = (distances + distances.T) / 2
        np.fill_diagonal(distances, 0.0)
        distances = np.clip(distances, 0.0, None)

        self.logger.info(f"Built {distances.shape[0]}x{distances.shape[1]} '{self.metric}' distance matrix")
        return distances
