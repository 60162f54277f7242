"""
shiftentropy core
=================

Compute only: numpy in, numbers out. No file I/O.

Structure:
    subsequence.py  - 1-based interleaved positions for (offset, stride)
    base.py         - BaseEstimator class with the embedding length check
    dispersion.py   - Dispersion / fuzzy / ensemble fuzzy dispersion entropy
    registry.py     - EstimatorRegistry for name lookup
    timeshift.py    - Time-shift stage: one entropy per offset at a scale
    multiscale.py   - Driver: TSEn curve over scales 1..kmax
    notices.py      - Clamp, failure and progress notices + sinks
    errors.py       - Exception hierarchy
"""

from shiftentropy.core.errors import (
    ShiftEntropyError,
    InvalidParameterError,
    SeriesTooShortError,
    EmbeddingError,
    ScaleComputationError,
)
from shiftentropy.core.base import BaseEstimator, min_embedding_length
from shiftentropy.core.registry import get_registry, get_estimator, EstimatorRegistry
from shiftentropy.core.subsequence import subsequence, subsequence_indices, subsequence_length
from shiftentropy.core.timeshift import OffsetOutcome, compute_stage_entropies, compute_stage_outcomes
from shiftentropy.core.multiscale import MultiscaleProfile, compute_curve, compute_profile
from shiftentropy.core.notices import (
    CollectingSink,
    Completed,
    KmaxClamped,
    NullSink,
    Progress,
    ScaleFailed,
    WarningSink,
)
