"""
Time-Shift Multiscale Entropy Driver (TSMEFuDE)
===============================================

Entropy curve TSEn[1..kmax] of a single series.

For every scale k = 1..kmax the time-shift stage computes one entropy per
interleaved subsequence; the scale value is the mean of the valid ones.
A scale with no usable subsequence becomes NaN and the loop carries on.

Checks run once, before the scale loop:
    - len(series) < dim      -> SeriesTooShortError (nothing computed)
    - kmax > len(series)     -> kmax clamped to len(series), KmaxClamped notice

Usage:
    from shiftentropy import compute_curve
    tsen = compute_curve(x, dim=3, nc=5, tau=1, kmax=20)

Reference:
    Time-shift coarse-graining follows Higuchi's fractal-dimension
    construction; the per-subsequence estimator is ensemble fuzzy
    dispersion entropy.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np

from shiftentropy.core.checks import as_series, check_positive_int
from shiftentropy.core.errors import ShiftEntropyError, SeriesTooShortError
from shiftentropy.core.notices import Completed, KmaxClamped, Progress, ScaleFailed, WarningSink
from shiftentropy.core.registry import get_estimator
from shiftentropy.core.timeshift import PARALLEL_MIN_OFFSETS, compute_stage_outcomes

logger = logging.getLogger(__name__)


@dataclass
class MultiscaleProfile:
    """Per-scale summary of the time-shift entropies."""
    mean: np.ndarray
    std: np.ndarray
    n_valid: np.ndarray
    kmax_requested: int
    failures: Dict[int, str] = field(default_factory=dict)

    @property
    def kmax(self) -> int:
        return len(self.mean)

    @property
    def scales(self) -> np.ndarray:
        return np.arange(1, self.kmax + 1)

    @property
    def clamped(self) -> bool:
        return self.kmax != self.kmax_requested

    @property
    def n_failed(self) -> int:
        return len(self.failures)

    def rows(self) -> List[Dict]:
        """One dict per scale (scale, tsen, tsen_std, n_valid, n_offsets)."""
        return [
            {
                'scale': int(k),
                'tsen': float(self.mean[k - 1]),
                'tsen_std': float(self.std[k - 1]),
                'n_valid': int(self.n_valid[k - 1]),
                'n_offsets': int(k),
            }
            for k in self.scales
        ]


def _progress_step(kmax: int) -> Optional[int]:
    """Scale interval between ~10% progress notices, None when kmax <= 10."""
    if kmax <= 10:
        return None
    return math.ceil(kmax / 10)


def compute_profile(
    series,
    dim: int = 3,
    nc: int = 5,
    tau: int = 1,
    kmax: int = 20,
    estimator: Optional[Callable] = None,
    sink=None,
    parallel: Optional[bool] = None,
    n_jobs: Optional[int] = None,
    backend: str = 'loky',
    parallel_min_offsets: int = PARALLEL_MIN_OFFSETS,
) -> MultiscaleProfile:
    """
    Compute the mean and spread of time-shift entropies at every scale.

    Args:
        series: 1D sequence of finite reals (not modified)
        dim: Embedding dimension
        nc: Number of classes
        tau: Time delay
        kmax: Maximum scale; clamped to len(series)
        estimator: Callable (x, dim, nc, tau) -> float; default EnsFuDE
        sink: Notice sink with notify(notice); default WarningSink
        parallel: Force/forbid the per-offset worker pool; None = auto
        n_jobs: joblib worker count (None = all cores)
        backend: joblib backend
        parallel_min_offsets: Auto mode threshold on the number of offsets

    Returns:
        MultiscaleProfile with exactly kmax (clamped) entries per array

    Raises:
        InvalidParameterError: bad series or non-positive parameter
        SeriesTooShortError: len(series) < dim
    """
    return _compute_profile(
        series, dim, nc, tau, kmax, estimator, sink,
        parallel=parallel,
        n_jobs=n_jobs,
        backend=backend,
        parallel_min_offsets=parallel_min_offsets,
    )


def _compute_profile(
    series,
    dim: int,
    nc: int,
    tau: int,
    kmax: int,
    estimator: Optional[Callable],
    sink,
    parallel: Optional[bool] = None,
    n_jobs: Optional[int] = None,
    backend: str = 'loky',
    parallel_min_offsets: int = PARALLEL_MIN_OFFSETS,
) -> MultiscaleProfile:
    # Both public entry points call this directly so WarningSink's
    # stacklevel lands on the user's line either way.
    x = as_series(series)
    dim = check_positive_int(dim, 'dim')
    nc = check_positive_int(nc, 'nc')
    tau = check_positive_int(tau, 'tau')
    kmax = check_positive_int(kmax, 'kmax')

    if sink is None:
        sink = WarningSink()
    if estimator is None:
        estimator = get_estimator()

    n = len(x)
    if n < dim:
        raise SeriesTooShortError(n, dim)

    kmax_requested = kmax
    if kmax > n:
        kmax = n
        sink.notify(KmaxClamped(original=kmax_requested, corrected=kmax))

    mean = np.full(kmax, np.nan)
    std = np.full(kmax, np.nan)
    n_valid = np.zeros(kmax, dtype=np.int64)
    failures: Dict[int, str] = {}
    step = _progress_step(kmax)

    for k in range(1, kmax + 1):
        try:
            outcomes = compute_stage_outcomes(
                x, k, dim, nc, tau,
                estimator=estimator,
                parallel=parallel,
                n_jobs=n_jobs,
                backend=backend,
                min_offsets=parallel_min_offsets,
            )
        except ShiftEntropyError as e:
            failures[k] = str(e)
            sink.notify(ScaleFailed(scale=k, message=str(e)))
        else:
            values = np.array([o.value for o in outcomes if o.ok])
            mean[k - 1] = float(np.mean(values))
            std[k - 1] = float(np.std(values))
            n_valid[k - 1] = len(values)

        if step is not None and k % step == 0:
            sink.notify(Progress(scale=k, kmax=kmax, percent=round(100 * k / kmax)))

    sink.notify(Completed(kmax=kmax, n_failed=len(failures)))
    logger.debug("TSEn over %d scales, %d failed", kmax, len(failures))

    return MultiscaleProfile(
        mean=mean,
        std=std,
        n_valid=n_valid,
        kmax_requested=kmax_requested,
        failures=failures,
    )


def compute_curve(
    series,
    dim: int = 3,
    nc: int = 5,
    tau: int = 1,
    kmax: int = 20,
    estimator: Optional[Callable] = None,
    sink=None,
    **kwargs,
) -> np.ndarray:
    """
    TSEn curve: mean time-shift entropy at scales 1..kmax.

    Returns a float array of length min(kmax, len(series)); NaN marks a
    scale where no subsequence could be evaluated. Accepts the same
    keyword arguments as compute_profile.
    """
    return _compute_profile(series, dim, nc, tau, kmax, estimator, sink, **kwargs).mean
