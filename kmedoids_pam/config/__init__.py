from .settings import (
    CLUSTERING_CONFIG,
    PARALLEL_CONFIG,
    DATA_CONFIG,
    LOGGING_CONFIG,
    VALIDATION_CONFIG,
    get_kmedoids_params,
    get_logging_config,
    get_demo_matrix,
)
