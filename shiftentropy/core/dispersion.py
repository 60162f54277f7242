"""
Dispersion Entropy Estimators
=============================

Symbolic entropy of a single sequence, used per subsequence by the
time-shift stage.

Pipeline:
    1. Map raw values into (0, 1)          ncdf | logsig | tansig | linear
    2. Scale to classes 1..nc              v = nc * u + 0.5
    3. Embed with dimension dim, delay tau
    4. Count dispersion patterns           crisp: round(v)
                                           fuzzy: two nearest classes, triangular memberships
    5. Shannon entropy (natural log) of the pattern distribution

Estimators:
    dispersion                 crisp dispersion entropy (DispEn)
    fuzzy_dispersion           fuzzy dispersion entropy (FuzzDE)
    ensemble_fuzzy_dispersion  mean FuzzDE over several mappings (EnsFuDE, default)

References:
    Rostaghi & Azami (2016) "Dispersion Entropy: A Measure for Time-Series Analysis"
    Azami & Escudero (2018) "Amplitude- and Fluctuation-Based Dispersion Entropy"
    Rostaghi, Khatibi, Ashory & Azami (2021) "Fuzzy Dispersion Entropy"
"""

from itertools import product
from typing import Sequence, Tuple

import numpy as np
from scipy.special import expit
from scipy.stats import norm

from shiftentropy.core.base import BaseEstimator
from shiftentropy.core.errors import InvalidParameterError


MAPPINGS = ('ncdf', 'logsig', 'tansig', 'linear')

# Keeps mapped values strictly inside (0, 1) so classes stay in 1..nc
EDGE = 1e-10


def map_to_unit(x: np.ndarray, mapping: str = 'ncdf') -> np.ndarray:
    """
    Map a sequence into (0, 1).

    ncdf/logsig/tansig standardise with the sequence's own mean and std;
    linear is min-max scaling. A constant sequence maps to 0.5 everywhere.
    """
    if mapping not in MAPPINGS:
        raise InvalidParameterError(f"Unknown mapping '{mapping}'. Available: {', '.join(MAPPINGS)}")

    x = np.asarray(x, dtype=np.float64)

    # np.std of a constant array can be a few ulp above zero
    if np.ptp(x) == 0:
        return np.full_like(x, 0.5)

    if mapping == 'linear':
        lo, hi = np.min(x), np.max(x)
        u = (x - lo) / (hi - lo)
    else:
        mu = np.mean(x)
        sigma = np.std(x)
        if mapping == 'ncdf':
            u = norm.cdf(x, loc=mu, scale=sigma)
        elif mapping == 'logsig':
            u = expit((x - mu) / sigma)
        else:
            u = 0.5 * (np.tanh((x - mu) / sigma) + 1.0)

    return np.clip(u, EDGE, 1.0 - EDGE)


def _embedding_index(n: int, dim: int, tau: int) -> np.ndarray:
    """Index matrix (n_vectors, dim) of delay-embedding vectors."""
    n_vectors = n - (dim - 1) * tau
    return np.arange(n_vectors)[:, None] + tau * np.arange(dim)[None, :]


def _pattern_codes(classes: np.ndarray, nc: int) -> np.ndarray:
    """Encode rows of zero-based classes (n_vectors, dim) as integers base nc."""
    dim = classes.shape[1]
    weights = nc ** np.arange(dim - 1, -1, -1, dtype=np.int64)
    return classes.astype(np.int64) @ weights


def _shannon(p: np.ndarray) -> float:
    p = p[p > 0]
    return max(float(-np.sum(p * np.log(p))), 0.0)


def _normalise(h: float, dim: int, nc: int, normalize: bool) -> float:
    if not normalize:
        return h
    n_patterns = float(nc) ** dim
    return h / np.log(n_patterns) if n_patterns > 1 else 0.0


def crisp_pattern_distribution(u: np.ndarray, dim: int, nc: int, tau: int) -> np.ndarray:
    """Relative frequencies of the dispersion patterns that occur."""
    classes = np.clip(np.round(nc * u + 0.5), 1, nc).astype(np.int64) - 1
    codes = _pattern_codes(classes[_embedding_index(len(u), dim, tau)], nc)
    _, counts = np.unique(codes, return_counts=True)
    return counts / len(codes)


def fuzzy_memberships(u: np.ndarray, nc: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Two nearest classes and their triangular memberships for each value.

    Returns (lower_class, upper_class, lower_weight, upper_weight) with
    zero-based classes; weights sum to 1 per value. Values beyond the
    outer class centres put all weight on the outer class.
    """
    v = nc * u + 0.5
    lower = np.floor(v)
    frac = v - lower
    lower_cls = np.clip(lower, 1, nc).astype(np.int64) - 1
    upper_cls = np.clip(lower + 1, 1, nc).astype(np.int64) - 1
    return lower_cls, upper_cls, 1.0 - frac, frac


def fuzzy_pattern_distribution(u: np.ndarray, dim: int, nc: int, tau: int) -> np.ndarray:
    """
    Fuzzy relative frequencies of dispersion patterns.

    Each embedding vector spreads unit mass over the 2**dim class
    assignments of its elements; the mass of an assignment is the product
    of the element memberships.
    """
    lower_cls, upper_cls, lower_w, upper_w = fuzzy_memberships(u, nc)
    idx = _embedding_index(len(u), dim, tau)
    n_vectors = idx.shape[0]

    lo_c, hi_c = lower_cls[idx], upper_cls[idx]
    lo_w, hi_w = lower_w[idx], upper_w[idx]

    all_codes = []
    all_weights = []
    for choice in product((False, True), repeat=dim):
        pick = np.array(choice)
        cls = np.where(pick, hi_c, lo_c)
        w = np.prod(np.where(pick, hi_w, lo_w), axis=1)
        keep = w > 0
        if np.any(keep):
            all_codes.append(_pattern_codes(cls[keep], nc))
            all_weights.append(w[keep])

    codes = np.concatenate(all_codes)
    weights = np.concatenate(all_weights)
    _, inverse = np.unique(codes, return_inverse=True)
    mass = np.bincount(inverse.ravel(), weights=weights)
    return mass / n_vectors


class DispersionEntropy(BaseEstimator):
    """Crisp dispersion entropy."""

    def __init__(self, mapping: str = 'ncdf', normalize: bool = False):
        if mapping not in MAPPINGS:
            raise InvalidParameterError(f"Unknown mapping '{mapping}'")
        self.mapping = mapping
        self.normalize = normalize

    @property
    def estimator_name(self) -> str:
        return 'dispersion'

    def compute(self, x, dim, nc, tau):
        u = map_to_unit(x, self.mapping)
        h = _shannon(crisp_pattern_distribution(u, dim, nc, tau))
        return _normalise(h, dim, nc, self.normalize)

    def __repr__(self):
        return f"DispersionEntropy(mapping={self.mapping!r}, normalize={self.normalize})"


class FuzzyDispersionEntropy(BaseEstimator):
    """Fuzzy dispersion entropy with triangular class memberships."""

    def __init__(self, mapping: str = 'ncdf', normalize: bool = False):
        if mapping not in MAPPINGS:
            raise InvalidParameterError(f"Unknown mapping '{mapping}'")
        self.mapping = mapping
        self.normalize = normalize

    @property
    def estimator_name(self) -> str:
        return 'fuzzy_dispersion'

    def compute(self, x, dim, nc, tau):
        u = map_to_unit(x, self.mapping)
        h = _shannon(fuzzy_pattern_distribution(u, dim, nc, tau))
        return _normalise(h, dim, nc, self.normalize)

    def __repr__(self):
        return f"FuzzyDispersionEntropy(mapping={self.mapping!r}, normalize={self.normalize})"


class EnsembleFuzzyDispersionEntropy(BaseEstimator):
    """Mean fuzzy dispersion entropy over several mapping functions."""

    def __init__(self, mappings: Sequence[str] = MAPPINGS, normalize: bool = False):
        mappings = tuple(mappings)
        if not mappings:
            raise InvalidParameterError("Ensemble needs at least one mapping")
        unknown = [m for m in mappings if m not in MAPPINGS]
        if unknown:
            raise InvalidParameterError(f"Unknown mapping(s): {', '.join(unknown)}")
        self.mappings = mappings
        self.normalize = normalize

    @property
    def estimator_name(self) -> str:
        return 'ensemble_fuzzy_dispersion'

    def compute(self, x, dim, nc, tau):
        values = []
        for mapping in self.mappings:
            u = map_to_unit(x, mapping)
            h = _shannon(fuzzy_pattern_distribution(u, dim, nc, tau))
            values.append(_normalise(h, dim, nc, self.normalize))
        return float(np.mean(values))

    def __repr__(self):
        return f"EnsembleFuzzyDispersionEntropy(mappings={self.mappings!r}, normalize={self.normalize})"


def dispersion_entropy(x, dim: int = 3, nc: int = 5, tau: int = 1,
                       mapping: str = 'ncdf', normalize: bool = False) -> float:
    """Crisp dispersion entropy of x."""
    return DispersionEntropy(mapping, normalize)(x, dim, nc, tau)


def fuzzy_dispersion_entropy(x, dim: int = 3, nc: int = 5, tau: int = 1,
                             mapping: str = 'ncdf', normalize: bool = False) -> float:
    """Fuzzy dispersion entropy of x."""
    return FuzzyDispersionEntropy(mapping, normalize)(x, dim, nc, tau)


def ensemble_fuzzy_dispersion_entropy(x, dim: int = 3, nc: int = 5, tau: int = 1,
                                      mappings: Sequence[str] = MAPPINGS,
                                      normalize: bool = False) -> float:
    """Ensemble fuzzy dispersion entropy (EnsFuDE) of x."""
    return EnsembleFuzzyDispersionEntropy(mappings, normalize)(x, dim, nc, tau)
