"""
shiftentropy Sequencer
======================

Runs the time-shift entropy stage for a data directory.
Pure orchestration — no computation here.

Data directory layout:
    <data>/manifest.yaml          paths + optional timeshift_entropy section
    <data>/observations.parquet
    <data>/output/signal/timeshift_entropy.parquet   (written)

Usage:
    from shiftentropy import run
    df = run('domains/eeg')
    df = run('domains/eeg', overrides={'kmax': 30, 'parallel': False})
"""

import time
from typing import Any, Dict, Optional

import polars as pl

from shiftentropy.config import load_config
from shiftentropy.io.manifest import get_observations_path, load_manifest, validate_manifest_paths
from shiftentropy.io.reader import load_observations
from shiftentropy.stages import timeshift_entropy
from shiftentropy.validation import ValidationError, validate_input


def run(
    data_path: str,
    overrides: Optional[Dict[str, Any]] = None,
    verbose: bool = True,
) -> pl.DataFrame:
    """
    Validate inputs, resolve configuration and compute all TSEn curves.

    Args:
        data_path: Data directory containing manifest.yaml (or the manifest file)
        overrides: Parameter overrides applied on top of the manifest
        verbose: Print progress

    Returns:
        timeshift_entropy DataFrame

    Raises:
        FileNotFoundError: manifest missing
        ValidationError: manifest paths or observations invalid
    """
    start = time.time()

    manifest = load_manifest(data_path)
    errors = validate_manifest_paths(manifest)
    if errors:
        raise ValidationError(errors)

    config = load_config(manifest['_manifest_path'], overrides=overrides)
    obs_path = get_observations_path(manifest)

    report = validate_input(load_observations(obs_path), min_length=config.dim)
    if verbose:
        print(report.summary())

    df = timeshift_entropy.run(
        obs_path,
        data_path=manifest['_data_dir'],
        config=config,
        verbose=verbose,
    )

    if verbose:
        print(f"\nDone in {time.time() - start:.1f}s")

    return df
