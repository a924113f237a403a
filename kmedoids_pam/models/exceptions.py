"""Exceptions raised by the clustering engine."""


class InvalidParameter(ValueError):
    """Raised when the engine is configured with out-of-range parameters."""
