"""
Base estimator class.

An estimator maps one subsequence to one non-negative entropy value:

    estimator(x, dim, nc, tau) -> float

The time-shift stage only relies on that call signature, so any callable
with it can be used. Subclassing BaseEstimator adds the shared embedding
length check and input cleaning.
"""

from abc import ABC, abstractmethod

import numpy as np

from shiftentropy.core.errors import EmbeddingError, InvalidParameterError


def min_embedding_length(dim: int, tau: int) -> int:
    """Smallest sequence length that yields one embedding vector."""
    return (dim - 1) * tau + 1


class BaseEstimator(ABC):
    """
    Base class for subsequence entropy estimators.

    Subclasses must:
    1. Define estimator_name property
    2. Implement compute() on a validated float64 array
    """

    @property
    @abstractmethod
    def estimator_name(self) -> str:
        """Return estimator name (registry key)."""
        pass

    @abstractmethod
    def compute(self, x: np.ndarray, dim: int, nc: int, tau: int) -> float:
        """
        Compute the entropy of a sequence long enough to embed.

        Args:
            x: 1D float64 array, finite, len(x) >= (dim - 1) * tau + 1
            dim: Embedding dimension
            nc: Number of classes
            tau: Time delay

        Returns:
            Non-negative entropy value
        """
        pass

    def __call__(self, x, dim: int, nc: int, tau: int) -> float:
        x = np.asarray(x, dtype=np.float64).ravel()
        if not np.all(np.isfinite(x)):
            raise InvalidParameterError(f"{self.estimator_name}: input contains non-finite values")
        if len(x) < min_embedding_length(dim, tau):
            raise EmbeddingError(len(x), dim, tau)
        return float(self.compute(x, dim, nc, tau))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
