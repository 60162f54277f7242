"""Configuration for the time-shift entropy curve."""

from shiftentropy.config.loader import (
    CurveConfig,
    config_from_dict,
    load_config,
    load_defaults,
)

__all__ = ['CurveConfig', 'config_from_dict', 'load_config', 'load_defaults']
