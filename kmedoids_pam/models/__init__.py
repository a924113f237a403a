from .exceptions import InvalidParameter
from .kmedoids import KMedoids, KMedoidsResult
from .estimator import PrecomputedKMedoids

__all__ = ["InvalidParameter", "KMedoids", "KMedoidsResult", "PrecomputedKMedoids"]
