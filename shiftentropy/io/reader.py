"""
Reader — all parquet reads go through here.

No other module should call pl.read_parquet directly.
"""

import polars as pl
from pathlib import Path
from typing import Dict, Optional

import numpy as np


# Output name -> subdirectory of <data>/output
STAGE_DIRS = {
    'timeshift_entropy': 'signal',
}


def load_observations(data_path: str) -> pl.DataFrame:
    """
    Load observations.parquet from a data directory, sorted by signal_0.

    A table without signal_0 is returned unsorted so validation can
    report the missing column.
    """
    p = Path(data_path)
    if p.is_file() and p.suffix == '.parquet':
        df = pl.read_parquet(str(p))
    elif (p / 'observations.parquet').exists():
        df = pl.read_parquet(str(p / 'observations.parquet'))
    else:
        raise FileNotFoundError(f"No observations.parquet in {data_path}")
    if 'signal_0' not in df.columns:
        return df
    return df.sort('signal_0')


def signal_arrays(obs: pl.DataFrame) -> Dict[str, np.ndarray]:
    """
    Split long-form observations into one float array per signal_id.

    Rows are ordered by signal_0 within each signal; null and non-finite
    values are dropped.
    """
    arrays = {}
    for signal_id in sorted(obs['signal_id'].unique().to_list()):
        values = (
            obs
            .filter(pl.col('signal_id') == signal_id)
            .sort('signal_0')
            .select(pl.col('value').cast(pl.Float64))
            .to_series()
            .drop_nulls()
            .to_numpy()
        )
        arrays[signal_id] = values[np.isfinite(values)]
    return arrays


def load_output(data_path: str, name: str) -> Optional[pl.DataFrame]:
    """
    Load a stage output by name.

    Searches output/<subdir>/<name>.parquet first,
    then output/<name>.parquet (flat fallback).
    """
    output_dir = _get_output_dir(data_path)
    filename = f"{name}.parquet"

    subdir = STAGE_DIRS.get(name, '')
    if subdir:
        path = output_dir / subdir / filename
        if path.exists():
            return pl.read_parquet(str(path))

    path = output_dir / filename
    if path.exists():
        return pl.read_parquet(str(path))

    return None


def output_path(data_path: str, name: str) -> Path:
    """Get the output path for a stage output by name."""
    output_dir = _get_output_dir(data_path)
    filename = f"{name}.parquet"
    subdir = STAGE_DIRS.get(name, '')
    if subdir:
        d = output_dir / subdir
        d.mkdir(parents=True, exist_ok=True)
        return d / filename
    return output_dir / filename


def _get_output_dir(data_path: str) -> Path:
    """Resolve the output directory from a data path."""
    p = Path(data_path)
    if p.is_file():
        p = p.parent
    output_dir = p / 'output'
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
