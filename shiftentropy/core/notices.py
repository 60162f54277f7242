"""
Side-channel notices emitted by the multiscale driver.

The driver never prints. It hands notices to a sink:

    WarningSink    (default) RuntimeWarning for clamp/failure, logging for progress
    NullSink       drops everything (library use)
    CollectingSink keeps every notice in a list (tests, callers that report later)

Any object with a `notify(notice)` method can be passed as a sink.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import List, Type, TypeVar

logger = logging.getLogger(__name__)

N = TypeVar('N')

# notify <- _compute_profile <- compute_curve / compute_profile <- caller
USER_STACKLEVEL = 4


@dataclass(frozen=True)
class KmaxClamped:
    """Requested maximum scale exceeded the series length."""
    original: int
    corrected: int


@dataclass(frozen=True)
class ScaleFailed:
    """No usable subsequence at a scale; its curve entry is NaN."""
    scale: int
    message: str


@dataclass(frozen=True)
class Progress:
    """Roughly 10% of the scales have been processed since the last notice."""
    scale: int
    kmax: int
    percent: int


@dataclass(frozen=True)
class Completed:
    kmax: int
    n_failed: int


class NullSink:
    """Discard all notices."""

    def notify(self, notice) -> None:
        pass


class CollectingSink:
    """Record notices in order of emission."""

    def __init__(self):
        self.notices: List[object] = []

    def notify(self, notice) -> None:
        self.notices.append(notice)

    def of_type(self, kind: Type[N]) -> List[N]:
        """Notices of a single kind, in emission order."""
        return [n for n in self.notices if isinstance(n, kind)]


class WarningSink:
    """
    Route notices to the warnings and logging machinery.

    Clamp and per-scale failures are RuntimeWarnings so they show up in
    interactive sessions and can be filtered or escalated by the caller.
    Progress goes to the module logger at INFO.
    """

    def notify(self, notice) -> None:
        if isinstance(notice, KmaxClamped):
            warnings.warn(
                f"compute_curve: kmax={notice.original} exceeds series length, "
                f"adjusted to {notice.corrected}",
                RuntimeWarning,
                stacklevel=USER_STACKLEVEL,
            )
        elif isinstance(notice, ScaleFailed):
            warnings.warn(
                f"compute_curve: calculation failed at k={notice.scale}: {notice.message}",
                RuntimeWarning,
                stacklevel=USER_STACKLEVEL,
            )
        elif isinstance(notice, Progress):
            logger.info("Calculation progress: %d%% (k=%d/%d)", notice.percent, notice.scale, notice.kmax)
        elif isinstance(notice, Completed):
            logger.info("Completed %d scales (%d failed)", notice.kmax, notice.n_failed)
