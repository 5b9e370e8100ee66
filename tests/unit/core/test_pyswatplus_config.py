"""Unit tests for configuration models and loading."""

from datetime import date
from pathlib import Path

import pytest
import yaml

from pyswatplus.core.config import (
    DemoConfig,
    PySWATplusConfig,
    SimulationConfig,
    build_config,
    load_config,
)
from pyswatplus.core.exceptions import ConfigurationError
from pyswatplus.core.mixins import ConfigMixin

pytestmark = [pytest.mark.unit, pytest.mark.quick]


class TestDefaults:

    def test_default_config(self):
        config = PySWATplusConfig.default()
        assert config.system.n_thread == 1
        assert config.simulation.output_interval == 'd'
        assert config.simulation.timeout == 3600
        assert config.demo.max_retries == 3

    def test_demo_url_trailing_slash_removed(self):
        assert DemoConfig(DEMO_DATA_URL='https://example.org/data/').url == 'https://example.org/data'

    def test_cache_dir_expanded(self):
        assert '~' not in str(DemoConfig(DEMO_CACHE_DIR='~/swat_cache').cache_dir)

    def test_default_cache_dir_expanded(self):
        cache_dir = DemoConfig().cache_dir
        assert '~' not in str(cache_dir)
        assert cache_dir == Path.home() / '.cache' / 'pyswatplus'

    def test_configs_are_frozen(self):
        config = PySWATplusConfig.default()
        with pytest.raises(Exception):
            config.system.n_thread = 4


class TestSimulationConfig:

    def test_interval_aliases(self):
        assert SimulationConfig(OUTPUT_INTERVAL='Monthly').output_interval == 'm'
        assert SimulationConfig(OUTPUT_INTERVAL='yr').output_interval == 'y'

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            SimulationConfig(OUTPUT_INTERVAL='hourly')

    def test_reversed_period_rejected(self):
        with pytest.raises(ValueError, match="before START_DATE"):
            SimulationConfig(START_DATE='2005-01-01', END_DATE='2003-01-01')

    def test_outputs_parsed(self):
        sim = SimulationConfig(OUTPUTS={'q_sim': {'file': 'channel_sd', 'variable': 'flo_out', 'unit': 1}})
        assert sim.outputs['q_sim'].file == 'channel_sd'


class TestBuildConfig:

    def test_flat_keys(self):
        config = build_config({
            'N_THREAD': 4,
            'START_DATE': '2003-01-01',
            'DEMO_VERSION': '61.0',
        })
        assert config.system.n_thread == 4
        assert config.simulation.start_date == date(2003, 1, 1)
        assert config.demo.version == '61.0'

    def test_nested_sections(self):
        config = build_config({
            'system': {'n_thread': 3, 'log_level': 'debug'},
            'simulation': {'years_skip': 2},
        })
        assert config.system.n_thread == 3
        assert config.system.log_level == 'DEBUG'
        assert config.simulation.years_skip == 2

    def test_from_dict(self):
        config = PySWATplusConfig.from_dict({'N_THREAD': 5, 'YEARS_SKIP': 1})
        assert config.system.n_thread == 5
        assert config.simulation.years_skip == 1

    def test_num_processes_alias(self):
        assert build_config({'NUM_PROCESSES': 6}).system.n_thread == 6

    def test_invalid_value_raises_configuration_error(self):
        with pytest.raises(ConfigurationError, match="n_thread"):
            build_config({'N_THREAD': 0})

    def test_to_dict_uses_uppercase_keys(self):
        flat = build_config({'N_THREAD': 2}).to_dict()
        assert flat['N_THREAD'] == 2
        assert flat['OUTPUT_INTERVAL'] == 'd'
        assert 'DEMO_DATA_URL' in flat

    def test_get_and_getitem(self):
        config = build_config({'SWATPLUS_TIMEOUT': 120})
        assert config['SWATPLUS_TIMEOUT'] == 120
        assert config.get('NOT_A_KEY', 'fallback') == 'fallback'
        with pytest.raises(KeyError):
            config['NOT_A_KEY']


class TestLoadConfig:

    def _write(self, path: Path, values) -> Path:
        path.write_text(yaml.safe_dump(values))
        return path

    def test_load_yaml(self, tmp_path):
        path = self._write(tmp_path / 'run.yaml', {
            'PROJECT_PATH': str(tmp_path / 'TxtInOut'),
            'OUTPUTS': {'q_sim': {'file': 'channel_sd', 'variable': 'flo_out'}},
            'PARAMETERS': {'cn2.hru | change = abschg': [-5, 5]},
        })
        config = load_config(path, use_env=False)
        assert config.simulation.project_path == tmp_path / 'TxtInOut'
        assert list(config.simulation.parameters) == ['cn2.hru | change = abschg']

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / 'missing.yaml')

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text("N_THREAD: [1, 2\n")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = self._write(tmp_path / 'list.yaml', [1, 2, 3])
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_precedence(self, tmp_path, monkeypatch):
        path = self._write(tmp_path / 'run.yaml', {'N_THREAD': 2, 'SWATPLUS_TIMEOUT': 100})
        monkeypatch.setenv('PYSWATPLUS_N_THREAD', '3')
        monkeypatch.setenv('PYSWATPLUS_SWATPLUS_TIMEOUT', '200')
        config = load_config(path, overrides={'N_THREAD': 5})
        assert config.system.n_thread == 5
        assert config.simulation.timeout == 200

    def test_env_ignored_when_disabled(self, tmp_path, monkeypatch):
        path = self._write(tmp_path / 'run.yaml', {'N_THREAD': 2})
        monkeypatch.setenv('PYSWATPLUS_N_THREAD', '3')
        assert load_config(path, use_env=False).system.n_thread == 2

    def test_from_file(self, tmp_path):
        path = self._write(tmp_path / 'run.yaml', {'OUTPUT_INTERVAL': 'monthly'})
        assert PySWATplusConfig.from_file(path, use_env=False).simulation.output_interval == 'm'


class _Configured(ConfigMixin):
    def __init__(self, config):
        self.config = config


class TestConfigMixin:

    def test_typed_access(self):
        obj = _Configured(build_config({'SWATPLUS_TIMEOUT': 90}))
        assert obj._get_config_value(lambda: obj.config.simulation.timeout, default=1) == 90

    def test_dict_fallback(self, mock_config):
        obj = _Configured(mock_config)
        value = obj._get_config_value(lambda: obj.config.system.n_thread, default=1, dict_key='N_THREAD')
        assert value == 2

    def test_default_without_config(self):
        obj = _Configured(None)
        assert obj._get_config_value(lambda: obj.config.system.n_thread, default=7, dict_key='N_THREAD') == 7

    def test_ensure_dir(self, tmp_path):
        target = ConfigMixin.ensure_dir(tmp_path / 'a' / 'b')
        assert target.is_dir()
