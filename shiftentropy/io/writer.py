"""
Writer — stage outputs and their parameter records.

    output/signal/timeshift_entropy.parquet       curve table
    output/signal/timeshift_entropy.params.yaml   parameters it was computed with

Stages write through write_output; nothing else calls write_parquet.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import polars as pl
import yaml

from shiftentropy.io.reader import output_path


def params_path(table_path: Path) -> Path:
    """Parameter record next to an output table."""
    return table_path.with_suffix('.params.yaml')


def write_params(params: Dict[str, Any], table_path: Path) -> Path:
    """Record the curve parameters an output table was computed with."""
    path = params_path(table_path)
    with open(path, 'w') as f:
        yaml.safe_dump(dict(params), f, sort_keys=True)
    return path


def read_params(table_path: Path) -> Optional[Dict[str, Any]]:
    """Parameter record for an output table (None if never written)."""
    path = params_path(Path(table_path))
    if not path.exists():
        return None
    with open(path) as f:
        return yaml.safe_load(f) or {}


def write_output(
    df: Optional[pl.DataFrame],
    data_path: str,
    name: str,
    params: Optional[Dict[str, Any]] = None,
    verbose: bool = True,
) -> Optional[Path]:
    """
    Write a stage table (and optionally its parameters) under <data>/output.

    A frame with columns but no rows is still written, so readers always
    find the schema. None or a frame without columns writes nothing.

    Returns:
        Path of the parquet file, or None when nothing was written
    """
    if df is None or df.width == 0:
        if verbose:
            print(f"  !! {name}: nothing to write")
        return None

    path = output_path(data_path, name)
    df.write_parquet(str(path))
    if params is not None:
        write_params(params, path)

    if verbose:
        print(f"  -> {path} ({df.height} rows)")

    return path
