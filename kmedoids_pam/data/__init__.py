from .data_loader import DistanceMatrixLoader, demo_matrix
from .data_processor import DistanceMatrixBuilder
