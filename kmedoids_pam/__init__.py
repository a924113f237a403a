"""K-Medoids clustering over precomputed distance matrices."""

from kmedoids_pam.models import InvalidParameter, KMedoids, KMedoidsResult, PrecomputedKMedoids

__version__ = "0.1.0"
