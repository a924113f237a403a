from typing import Dict, Any

# Clustering configurations
CLUSTERING_CONFIG = {
    'kmedoids_params': {
        'n_clusters': 2,
        'start_prob': 0.90,  # Seeding window over the sorted distance-to-closest-medoid list
        'end_prob': 0.99,
        'max_iter': 10,
        'tol': 0.01
    },
    'distances': ['euclidean', 'manhattan', 'cosine', 'correlation', 'braycurtis'],
    'default_distance': 'euclidean'
}

# Parallel processing configurations
PARALLEL_CONFIG = {
    'n_jobs': None,  # None or 1 evaluates swap candidates sequentially
    'backend': 'loky',
    'batch_multiplier': 4  # Candidates per worker evaluated before checking for an accepted swap
}

# Input data
DATA_CONFIG = {
    'supported_formats': ['.npy', '.csv', '.txt'],
    'csv_separator': ',',
    'demo_matrix': [
        [0, 1, 2, 3, 4],
        [1, 0, 1, 2, 3],
        [2, 1, 0, 1, 2],
        [3, 2, 1, 0, 1],
        [4, 3, 2, 1, 0],
    ]
}

# Logging configuration
LOGGING_CONFIG = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
}

# Validation and error checking
VALIDATION_CONFIG = {
    'check_file_existence': True,
    'check_symmetry': True,
    'check_zero_diagonal': True,
    'symmetry_tol': 1e-8,
    'handle_nan_values': True
}

def get_kmedoids_params() -> Dict[str, Any]:
    """Get default parameters for the k-medoids engine."""
    return dict(CLUSTERING_CONFIG['kmedoids_params'])

def get_logging_config() -> Dict[str, Any]:
    return dict(LOGGING_CONFIG)

def get_demo_matrix() -> list:
    """5-point line metric: d(i, j) = |i - j|."""
    return [list(row) for row in DATA_CONFIG['demo_matrix']]
