"""Parquet and manifest I/O."""

from shiftentropy.io.manifest import get_observations_path, load_manifest, validate_manifest_paths
from shiftentropy.io.reader import load_observations, load_output, output_path, signal_arrays
from shiftentropy.io.writer import read_params, write_output, write_params
