"""
Time-Shift Entropy Stage
========================

Entropy of every interleaved subsequence at one scale k.

For each offset m in 1..k the subsequence x[m], x[m+k], x[m+2k], ... is
handed to the estimator. Each offset yields a tagged outcome:

    ok       estimator returned a finite value
    skipped  subsequence shorter than dim, estimator not called
    failed   estimator raised or returned a non-finite value

The stage raises ScaleComputationError when no offset is ok. Offsets are
independent; when k is large enough they are mapped over a joblib pool.
Outcomes are always returned in offset order.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from shiftentropy.core.checks import as_series, check_positive_int
from shiftentropy.core.errors import ScaleComputationError
from shiftentropy.core.registry import get_estimator
from shiftentropy.core.subsequence import subsequence

logger = logging.getLogger(__name__)


OK = 'ok'
SKIPPED = 'skipped'
FAILED = 'failed'

# Below this many offsets the pool costs more than it saves
PARALLEL_MIN_OFFSETS = 5


@dataclass(frozen=True)
class OffsetOutcome:
    """Result of one offset at one scale."""
    offset: int
    length: int
    status: str
    value: float = np.nan
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OK


def evaluate_offset(
    series: np.ndarray,
    offset: int,
    scale: int,
    dim: int,
    nc: int,
    tau: int,
    estimator: Callable,
) -> OffsetOutcome:
    """Build the subsequence for (offset, scale) and run the estimator on it."""
    sub = subsequence(series, offset, scale)
    n = len(sub)

    if n < dim:
        return OffsetOutcome(offset, n, SKIPPED)

    try:
        value = float(estimator(sub, dim, nc, tau))
    except Exception as e:
        logger.debug("k=%d offset=%d: estimator failed: %s: %s", scale, offset, type(e).__name__, e)
        return OffsetOutcome(offset, n, FAILED, error=f"{type(e).__name__}: {e}")

    if not np.isfinite(value):
        return OffsetOutcome(offset, n, FAILED, error=f"non-finite estimate ({value})")

    return OffsetOutcome(offset, n, OK, value)


def use_parallel(
    scale: int,
    parallel: Optional[bool] = None,
    n_jobs: Optional[int] = None,
    min_offsets: int = PARALLEL_MIN_OFFSETS,
) -> bool:
    """
    Decide whether offsets at this scale go to a worker pool.

    parallel=True/False forces the choice. With parallel=None the pool is
    used when scale > min_offsets and more than one worker is available.
    """
    if parallel is not None:
        return bool(parallel)
    if scale <= min_offsets:
        return False
    return effective_n_jobs(-1 if n_jobs is None else n_jobs) > 1


def compute_stage_outcomes(
    series,
    scale: int,
    dim: int,
    nc: int,
    tau: int,
    estimator: Optional[Callable] = None,
    parallel: Optional[bool] = None,
    n_jobs: Optional[int] = None,
    backend: str = 'loky',
    min_offsets: int = PARALLEL_MIN_OFFSETS,
) -> List[OffsetOutcome]:
    """
    Tagged outcomes for offsets 1..scale, in offset order.

    Args:
        series: Input time series (not modified)
        scale: Scale k (number of offsets and stride)
        dim: Embedding dimension
        nc: Number of classes
        tau: Time delay
        estimator: Callable (x, dim, nc, tau) -> float; default EnsFuDE
        parallel: Force (True) or forbid (False) the worker pool; None = auto
        n_jobs: joblib worker count (None = all cores)
        backend: joblib backend
        min_offsets: Auto mode uses the pool only above this many offsets

    Returns:
        List of OffsetOutcome, one per offset

    Raises:
        ScaleComputationError: no offset produced a value
    """
    x = as_series(series)
    scale = check_positive_int(scale, 'k')
    dim = check_positive_int(dim, 'dim')
    nc = check_positive_int(nc, 'nc')
    tau = check_positive_int(tau, 'tau')
    if estimator is None:
        estimator = get_estimator()

    offsets = range(1, scale + 1)

    if use_parallel(scale, parallel, n_jobs, min_offsets):
        workers = -1 if n_jobs is None else n_jobs
        outcomes = Parallel(n_jobs=workers, backend=backend)(
            delayed(evaluate_offset)(x, m, scale, dim, nc, tau, estimator)
            for m in offsets
        )
    else:
        outcomes = [evaluate_offset(x, m, scale, dim, nc, tau, estimator) for m in offsets]

    outcomes = sorted(outcomes, key=lambda o: o.offset)

    if not any(o.ok for o in outcomes):
        raise ScaleComputationError(scale, outcomes)

    return outcomes


def compute_stage_entropies(
    series,
    scale: int,
    dim: int,
    nc: int,
    tau: int,
    estimator: Optional[Callable] = None,
    **kwargs,
) -> np.ndarray:
    """
    Per-offset entropies at one scale, NaN where an offset was skipped or failed.

    Same arguments and errors as compute_stage_outcomes. Callers filter NaN
    before averaging.
    """
    outcomes = compute_stage_outcomes(series, scale, dim, nc, tau, estimator, **kwargs)
    return np.array([o.value for o in outcomes], dtype=np.float64)
