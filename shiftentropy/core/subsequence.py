"""
Interleaved subsequences for time-shift coarse-graining.

At scale k the series is split into k subsequences: offset m in 1..k takes
positions m, m+k, m+2k, ... (1-based). Positions here are 1-based to match
the usual statement of the method; `subsequence` converts to numpy slicing.
"""

import numpy as np


def subsequence_length(n: int, offset: int, stride: int) -> int:
    """Number of positions offset, offset+stride, ... not exceeding n."""
    if offset > n:
        return 0
    return (n - offset) // stride + 1


def subsequence_indices(n: int, offset: int, stride: int) -> np.ndarray:
    """
    1-based positions {offset, offset+stride, ...} <= n.

    Empty when offset > n.
    """
    return np.arange(offset, n + 1, stride, dtype=np.int64)


def subsequence(series: np.ndarray, offset: int, stride: int) -> np.ndarray:
    """Values of `series` at the 1-based positions for (offset, stride)."""
    series = np.asarray(series, dtype=np.float64)
    # Fancy indexing copies, so the input is never shared
    return series[subsequence_indices(len(series), offset, stride) - 1]
