"""Argument checks shared by the stage and the driver."""

import numpy as np

from shiftentropy.core.errors import InvalidParameterError


def as_series(series) -> np.ndarray:
    """
    Coerce input to a 1D float64 array.

    Row and column vectors are flattened. Empty, multi-dimensional,
    non-numeric or non-finite input raises InvalidParameterError.
    """
    try:
        x = np.asarray(series, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Series must be numeric: {e}") from e

    if x.ndim == 2 and 1 in x.shape:
        x = x.ravel()
    if x.ndim != 1:
        raise InvalidParameterError(f"Series must be one-dimensional, got shape {x.shape}")
    if x.size == 0:
        raise InvalidParameterError("Series must not be empty")
    if not np.all(np.isfinite(x)):
        raise InvalidParameterError("Series contains NaN or infinite values")
    return x


def check_positive_int(value, name: str) -> int:
    """Return value as int, or raise if it is not a positive integer."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    if value < 1:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value}")
    return int(value)
