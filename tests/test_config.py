"""Tests for configuration loading and the estimator registry."""

import numpy as np
import pytest
import yaml

from shiftentropy.config import config_from_dict, load_config, load_defaults
from shiftentropy.core.dispersion import DispersionEntropy, EnsembleFuzzyDispersionEntropy
from shiftentropy.core.errors import InvalidParameterError
from shiftentropy.core.registry import EstimatorRegistry, get_estimator, get_registry, reset_registry


def _write_yaml(path, data):
    with open(path, 'w') as f:
        yaml.safe_dump(data, f)
    return path


class TestLoadConfig:

    def test_packaged_defaults(self):
        config = load_config()
        assert (config.dim, config.nc, config.tau, config.kmax) == (3, 5, 1, 20)
        assert config.estimator == 'ensemble_fuzzy_dispersion'
        assert config.parallel is None
        assert config.n_jobs is None

    def test_defaults_match_dataclass(self):
        """defaults.yaml and CurveConfig() agree."""
        assert load_config().to_dict() == config_from_dict({}).to_dict()
        assert set(load_defaults()) == set(config_from_dict({}).to_dict())

    def test_file_section_overrides_defaults(self, tmp_path):
        path = _write_yaml(tmp_path / 'manifest.yaml', {
            'paths': {'observations': 'observations.parquet'},
            'timeshift_entropy': {'kmax': 7, 'parallel': False},
        })
        config = load_config(path)
        assert config.kmax == 7
        assert config.parallel is False
        assert config.dim == 3

    def test_file_without_section(self, tmp_path):
        path = _write_yaml(tmp_path / 'manifest.yaml', {'paths': {}})
        assert load_config(path).kmax == 20

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        path = _write_yaml(tmp_path / 'c.yaml', {'timeshift_entropy': {'kmax': 7}})
        config = load_config(path, overrides={'kmax': 9, 'dim': None})
        assert config.kmax == 9
        assert config.dim == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.yaml')

    def test_unknown_key(self):
        with pytest.raises(InvalidParameterError, match="embedding"):
            load_config(overrides={'embedding': 3})

    @pytest.mark.parametrize('values', [{'dim': 0}, {'kmax': 'many'}, {'parallel': 'sometimes'}])
    def test_invalid_values(self, values):
        with pytest.raises(InvalidParameterError):
            config_from_dict(values)

    def test_curve_kwargs(self):
        kwargs = load_config(overrides={'parallel': 'auto', 'n_jobs': 2}).curve_kwargs()
        assert kwargs['parallel'] is None
        assert kwargs['n_jobs'] == 2
        assert isinstance(kwargs['estimator'], EnsembleFuzzyDispersionEntropy)


class TestEstimatorRegistry:

    def setup_method(self):
        reset_registry()

    def teardown_method(self):
        reset_registry()

    def test_builtin_estimators(self):
        assert get_registry().list_estimators() == [
            'dispersion', 'ensemble_fuzzy_dispersion', 'fuzzy_dispersion',
        ]

    def test_options_filtered_per_estimator(self):
        """`mappings` is ensemble-only; `mapping` single-mapping only."""
        crisp = get_estimator('dispersion', mapping='linear', mappings=['ncdf'], normalize=True)
        assert isinstance(crisp, DispersionEntropy)
        assert crisp.mapping == 'linear'
        assert crisp.normalize

        ens = get_estimator('ensemble_fuzzy_dispersion', mapping='linear', mappings=['ncdf', 'linear'])
        assert ens.mappings == ('ncdf', 'linear')

    def test_unknown_estimator(self):
        with pytest.raises(KeyError, match="Available"):
            get_estimator('sample_entropy')

    def test_register_custom(self):
        def make_constant(value=1.0):
            return lambda x, dim, nc, tau: value

        registry = EstimatorRegistry()
        registry.register('constant', make_constant)
        est = registry.create('constant', value=2.5, normalize=True)
        assert est(np.arange(10.0), 2, 3, 1) == 2.5
        assert registry.has_estimator('constant')

    def test_config_builds_registered_estimator(self):
        config = load_config(overrides={'estimator': 'fuzzy_dispersion', 'mapping': 'tansig'})
        est = config.build_estimator()
        assert est.estimator_name == 'fuzzy_dispersion'
        assert est.mapping == 'tansig'
