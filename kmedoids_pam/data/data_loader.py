"""
Data loading utilities for distance matrices and feature tables.
"""

import numpy as np
import pandas as pd
import logging
from typing import Dict, Any, Union
from pathlib import Path
from scipy.spatial.distance import squareform

from kmedoids_pam.config import DATA_CONFIG, VALIDATION_CONFIG, get_demo_matrix


def demo_matrix() -> np.ndarray:
    """Distance matrix of five evenly spaced points on a line."""
    return np.asarray(get_demo_matrix(), dtype=np.float64)


class DistanceMatrixLoader:
    """Handles loading and validation of distance matrices."""

    def __init__(self, validate_data: bool = True):
        """
        Initialize the data loader.

        Args:
            validate_data: Whether to validate loaded data
        """
        self.validate_data = validate_data
        self.logger = logging.getLogger(__name__)

    def load(self, path: Union[str, Path]) -> np.ndarray:
        """
        Load a square distance matrix.

        A single row of values is read as a condensed distance vector
        (upper triangle, row by row) and expanded to the square form.

        Args:
            path: Path to a .npy, .csv or .txt file

        Returns:
            Distance matrix of shape (n, n)

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the format is unsupported or the data is not a matrix
        """
        try:
            data = self._read_array(path)
            if data.ndim == 2 and data.shape[0] == 1 and data.shape[1] > 1:
                data = data.ravel()
            if data.ndim == 1:
                self.logger.info(f"Expanding condensed distance vector of length {data.shape[0]}")
                data = squareform(data, checks=False)

            if data.ndim != 2 or data.shape[0] != data.shape[1]:
                raise ValueError(f"Distance matrix must be square, got shape {data.shape}")

            self.logger.info(f"Distance matrix shape: {data.shape}")
            return data

        except Exception as e:
            self.logger.error(f"Failed to load distance matrix {path}: {str(e)}")
            raise

    def load_features(self, path: Union[str, Path]) -> np.ndarray:
        """
        Load a feature table, one row per point.

        Args:
            path: Path to a .npy, .csv or .txt file

        Returns:
            2-D array of shape (n_points, n_features)
        """
        try:
            data = self._read_array(path)
            if data.ndim == 1:
                data = data.reshape(-1, 1)
            self.logger.info(f"Feature table shape: {data.shape}")
            return data

        except Exception as e:
            self.logger.error(f"Failed to load features {path}: {str(e)}")
            raise

    def _read_array(self, path: Union[str, Path]) -> np.ndarray:
        path = Path(path)

        if self.validate_data and VALIDATION_CONFIG['check_file_existence']:
            self._check_file_existence(path)

        suffix = path.suffix.lower()
        if suffix not in DATA_CONFIG['supported_formats']:
            raise ValueError(
                f"Unsupported file format '{suffix}', expected one of {DATA_CONFIG['supported_formats']}"
            )

        self.logger.info(f"Loading data from: {path}")
        if suffix == '.npy':
            data = np.load(path, allow_pickle=False)
        elif suffix == '.csv':
            data = pd.read_csv(path, header=None, sep=DATA_CONFIG['csv_separator']).to_numpy()
        else:
            data = np.loadtxt(path)

        return np.asarray(data, dtype=np.float64)

    def _check_file_existence(self, path: Path) -> None:
        """Check if the data file exists."""
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

    @staticmethod
    def get_matrix_info(matrix: np.ndarray) -> Dict[str, Any]:
        """
        Get information about a distance matrix.

        Args:
            matrix: Square distance matrix

        Returns:
            Dictionary containing matrix information
        """
        tol = VALIDATION_CONFIG['symmetry_tol']
        info = {
            'shape': matrix.shape,
            'dtype': matrix.dtype,
            'min_value': np.min(matrix),
            'max_value': np.max(matrix),
            'has_nan': np.isnan(matrix).any(),
            'has_inf': np.isinf(matrix).any(),
            'is_symmetric': bool(np.allclose(matrix, matrix.T, atol=tol)),
            'zero_diagonal': bool(np.all(np.abs(np.diag(matrix)) <= tol))
        }

        return info
