"""
Exceptions raised by the time-shift entropy engine.

    ShiftEntropyError          base class
    InvalidParameterError      bad series or non-positive integer parameter
    SeriesTooShortError        series shorter than the embedding dimension (fatal)
    EmbeddingError             estimator input too short for one embedding vector
    ScaleComputationError      no usable subsequence at a scale (caught by the driver)
"""

from typing import Optional


class ShiftEntropyError(Exception):
    """Base class for all shiftentropy errors."""


class InvalidParameterError(ShiftEntropyError, ValueError):
    """Raised when an input series or integer parameter is invalid."""


class SeriesTooShortError(ShiftEntropyError, ValueError):
    """Raised when the series is shorter than the embedding dimension."""

    def __init__(self, length: int, dim: int):
        self.length = length
        self.dim = dim
        super().__init__(
            f"Time series length ({length}) must be at least the "
            f"embedding dimension dim={dim}"
        )


class EmbeddingError(ShiftEntropyError, ValueError):
    """Raised by an estimator when no embedding vector can be formed."""

    def __init__(self, length: int, dim: int, tau: int):
        self.length = length
        self.dim = dim
        self.tau = tau
        self.required = (dim - 1) * tau + 1
        super().__init__(
            f"Need at least {self.required} samples for dim={dim}, tau={tau}, "
            f"got {length}"
        )


class ScaleComputationError(ShiftEntropyError, RuntimeError):
    """Raised by the time-shift stage when every offset at a scale is unusable."""

    def __init__(self, scale: int, outcomes: Optional[list] = None):
        self.scale = scale
        self.outcomes = outcomes or []
        n_skipped = sum(1 for o in self.outcomes if o.status == 'skipped')
        n_failed = sum(1 for o in self.outcomes if o.status == 'failed')
        super().__init__(
            f"All subsequences are unusable at scale k={scale} "
            f"({n_skipped} too short, {n_failed} estimator failures)"
        )
