"""
Stage: Time-Shift Multiscale Entropy
====================================

Per-signal TSEn curve (mean and spread of time-shift entropies per scale).

Input:
    observations.parquet (signal_id, signal_0, value)

Output:
    timeshift_entropy.parquet (one row per signal per scale)
    - signal_id, scale
    - tsen       mean entropy over valid offsets (NaN = scale failed)
    - tsen_std   std of entropy over valid offsets
    - n_valid    offsets that produced a value
    - n_offsets  offsets at this scale (= scale)
    timeshift_entropy.params.yaml (curve parameters used)

Signals shorter than the embedding dimension are skipped with a warning;
the other signals are still computed.
"""

import logging
import warnings
from typing import Optional

import polars as pl

from shiftentropy.config import CurveConfig, load_config
from shiftentropy.core.errors import ShiftEntropyError
from shiftentropy.core.multiscale import compute_profile
from shiftentropy.core.notices import CollectingSink, KmaxClamped, ScaleFailed
from shiftentropy.io.reader import load_observations, signal_arrays
from shiftentropy.io.writer import write_output

logger = logging.getLogger(__name__)


OUTPUT_NAME = 'timeshift_entropy'

OUTPUT_SCHEMA = {
    'signal_id': pl.Utf8,
    'scale': pl.Int64,
    'tsen': pl.Float64,
    'tsen_std': pl.Float64,
    'n_valid': pl.Int64,
    'n_offsets': pl.Int64,
}


def compute_signals(
    obs: pl.DataFrame,
    config: Optional[CurveConfig] = None,
    verbose: bool = True,
) -> pl.DataFrame:
    """
    Compute the TSEn profile of every signal in a long-form table.

    Args:
        obs: Observations with signal_id, signal_0, value
        config: Curve parameters (default: packaged defaults)
        verbose: Print one line per signal

    Returns:
        Long-form DataFrame with OUTPUT_SCHEMA columns
    """
    config = config or load_config()
    kwargs = config.curve_kwargs()

    rows = []
    arrays = signal_arrays(obs)

    for signal_id, values in arrays.items():
        sink = CollectingSink()
        try:
            profile = compute_profile(values, sink=sink, **kwargs)
        except ShiftEntropyError as e:
            warnings.warn(f"timeshift_entropy.run: {signal_id}: {type(e).__name__}: {e}", RuntimeWarning, stacklevel=2)
            continue

        for clamp in sink.of_type(KmaxClamped):
            logger.info("%s: kmax %d clamped to %d", signal_id, clamp.original, clamp.corrected)
        for failed in sink.of_type(ScaleFailed):
            logger.warning("%s: scale k=%d failed: %s", signal_id, failed.scale, failed.message)

        for row in profile.rows():
            rows.append({'signal_id': str(signal_id), **row})

        if verbose:
            print(f"  {signal_id}: {profile.kmax} scales, {profile.n_failed} failed"
                  + (f" (kmax clamped from {profile.kmax_requested})" if profile.clamped else ""))

    if rows:
        return pl.DataFrame(rows, schema=OUTPUT_SCHEMA)
    return pl.DataFrame(schema=OUTPUT_SCHEMA)


def run(
    observations_path: str,
    data_path: str = ".",
    config: Optional[CurveConfig] = None,
    verbose: bool = True,
) -> pl.DataFrame:
    """
    Compute TSEn curves for all signals and write timeshift_entropy.parquet.

    Args:
        observations_path: Path to observations.parquet (or its directory)
        data_path: Root data directory (for write_output)
        config: Curve parameters (default: packaged defaults)
        verbose: Print progress

    Returns:
        DataFrame with per-signal, per-scale entropy
    """
    config = config or load_config()

    if verbose:
        print("=" * 70)
        print("TIME-SHIFT MULTISCALE ENTROPY")
        print(f"dim={config.dim} nc={config.nc} tau={config.tau} kmax={config.kmax} "
              f"estimator={config.estimator}")
        print("=" * 70)

    obs = load_observations(observations_path)

    if verbose:
        print(f"\nLoaded observations: {obs.shape}")

    df = compute_signals(obs, config, verbose=verbose)
    write_output(df, data_path, OUTPUT_NAME, params=config.to_dict(), verbose=verbose)

    return df
