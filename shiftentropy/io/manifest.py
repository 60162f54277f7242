"""
Manifest — parse manifest.yaml for a data directory.

    paths:
      observations: observations.parquet
    timeshift_entropy:
      dim: 3
      kmax: 30
"""

import yaml
from pathlib import Path
from typing import Dict, Any, List


def load_manifest(data_path: str) -> Dict[str, Any]:
    """
    Load manifest.yaml from a data directory.

    Tries:
        1. data_path/manifest.yaml
        2. data_path itself (if it's a .yaml file)
    """
    p = Path(data_path)

    if p.is_file() and p.suffix in ('.yaml', '.yml'):
        manifest_path = p
    else:
        manifest_path = p / 'manifest.yaml'

    if not manifest_path.exists():
        raise FileNotFoundError(f"No manifest.yaml in {data_path}")

    with open(manifest_path) as f:
        manifest = yaml.safe_load(f) or {}

    # Stash the manifest path for resolving relative paths
    manifest['_manifest_path'] = str(manifest_path)
    manifest['_data_dir'] = str(manifest_path.parent)

    return manifest


def get_observations_path(manifest: Dict[str, Any]) -> str:
    """Get absolute path to observations.parquet from manifest."""
    obs_rel = manifest.get('paths', {}).get('observations', 'observations.parquet')
    data_dir = Path(manifest.get('_data_dir', '.'))
    return str(data_dir / obs_rel)


def validate_manifest_paths(manifest: Dict[str, Any]) -> List[str]:
    """Validate input paths in the manifest before running anything.

    Returns list of errors. Empty list = all paths valid.
    """
    errors = []
    obs = Path(get_observations_path(manifest))
    if not obs.exists():
        errors.append(f"observations file not found: {obs}")
    return errors
