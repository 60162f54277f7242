"""
shiftentropy — time-shift multiscale fuzzy dispersion entropy (TSMEFuDE).

Public API:
    from shiftentropy import compute_curve
    tsen = compute_curve(x, dim=3, nc=5, tau=1, kmax=20)

    from shiftentropy import run
    run(data_path)      # manifest.yaml + observations.parquet -> timeshift_entropy.parquet

Layers:
    shiftentropy.core        Compute — numpy in, numbers out (no file I/O)
    shiftentropy.stages      Runners — read parquet, call core, write parquet
    shiftentropy.io          Parquet I/O (reader, writer, manifest)
    shiftentropy.config      Parameter defaults and YAML loading
    shiftentropy.validation  Input validation for observation tables
"""

from shiftentropy.core import (
    CollectingSink,
    NullSink,
    WarningSink,
    MultiscaleProfile,
    compute_curve,
    compute_profile,
    compute_stage_entropies,
    get_estimator,
)
from shiftentropy.core.dispersion import (
    dispersion_entropy,
    ensemble_fuzzy_dispersion_entropy,
    fuzzy_dispersion_entropy,
)
from shiftentropy.run import run

__all__ = [
    "compute_curve",
    "compute_profile",
    "compute_stage_entropies",
    "MultiscaleProfile",
    "get_estimator",
    "dispersion_entropy",
    "fuzzy_dispersion_entropy",
    "ensemble_fuzzy_dispersion_entropy",
    "CollectingSink",
    "NullSink",
    "WarningSink",
    "run",
]
