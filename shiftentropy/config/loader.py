"""
Curve Configuration Loader
==========================

Resolve time-shift entropy parameters from, in increasing priority:

    1. shiftentropy/config/defaults.yaml
    2. a YAML file (manifest.yaml or a standalone config), `timeshift_entropy` section
    3. explicit overrides (None values are ignored)

Usage:
    from shiftentropy.config import load_config

    config = load_config()                          # packaged defaults
    config = load_config('domains/eeg/manifest.yaml', overrides={'kmax': 30})
    tsen = compute_curve(x, **config.curve_kwargs())
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from shiftentropy.core.checks import check_positive_int
from shiftentropy.core.dispersion import MAPPINGS
from shiftentropy.core.errors import InvalidParameterError
from shiftentropy.core.registry import get_estimator


SECTION = 'timeshift_entropy'
DEFAULTS_PATH = Path(__file__).parent / 'defaults.yaml'


@dataclass
class CurveConfig:
    """Resolved parameters for one curve computation."""
    dim: int = 3
    nc: int = 5
    tau: int = 1
    kmax: int = 20
    estimator: str = 'ensemble_fuzzy_dispersion'
    mapping: str = 'ncdf'
    mappings: List[str] = field(default_factory=lambda: list(MAPPINGS))
    normalize: bool = False
    parallel: Optional[bool] = None
    n_jobs: Optional[int] = None
    backend: str = 'loky'
    parallel_min_offsets: int = 5

    def __post_init__(self):
        self.dim = check_positive_int(self.dim, 'dim')
        self.nc = check_positive_int(self.nc, 'nc')
        self.tau = check_positive_int(self.tau, 'tau')
        self.kmax = check_positive_int(self.kmax, 'kmax')
        self.parallel_min_offsets = check_positive_int(self.parallel_min_offsets, 'parallel_min_offsets')
        self.parallel = _parse_parallel(self.parallel)
        self.mappings = list(self.mappings)

    def build_estimator(self) -> Callable:
        """Instantiate the configured estimator from the registry."""
        return get_estimator(
            self.estimator,
            mapping=self.mapping,
            mappings=self.mappings,
            normalize=self.normalize,
        )

    def curve_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for compute_curve / compute_profile."""
        return {
            'dim': self.dim,
            'nc': self.nc,
            'tau': self.tau,
            'kmax': self.kmax,
            'estimator': self.build_estimator(),
            'parallel': self.parallel,
            'n_jobs': self.n_jobs,
            'backend': self.backend,
            'parallel_min_offsets': self.parallel_min_offsets,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_parallel(value) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('auto', 'none', ''):
        return None
    raise InvalidParameterError(f"parallel must be auto, true or false, got {value!r}")


def _read_section(path: Path) -> Dict[str, Any]:
    """Read the timeshift_entropy section of a YAML file ({} if absent)."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise InvalidParameterError(f"{path}: expected a mapping at top level")
    section = raw.get(SECTION) or {}
    if not isinstance(section, dict):
        raise InvalidParameterError(f"{path}: '{SECTION}' must be a mapping")
    return dict(section)


def load_defaults() -> Dict[str, Any]:
    """Packaged default parameters as a dict."""
    return _read_section(DEFAULTS_PATH)


def load_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> CurveConfig:
    """
    Merge defaults, an optional YAML file and overrides into a CurveConfig.

    Args:
        path: YAML file with a `timeshift_entropy` section (e.g. manifest.yaml)
        overrides: Explicit values; keys with value None are ignored

    Returns:
        Validated CurveConfig

    Raises:
        FileNotFoundError: path given but missing
        InvalidParameterError: unknown keys or invalid values
    """
    merged = load_defaults()

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        merged.update(_read_section(path))

    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    return config_from_dict(merged)


def config_from_dict(values: Dict[str, Any]) -> CurveConfig:
    """Build a CurveConfig, rejecting keys it does not know."""
    known = set(CurveConfig.__dataclass_fields__)
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidParameterError(f"Unknown {SECTION} keys: {', '.join(unknown)}")
    return CurveConfig(**values)
