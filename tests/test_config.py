"""
Tests for configuration loading and the immutable controller config.
"""
import dataclasses
import os
import sys
import tempfile

import pytest
import yaml

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentilight.core.config import ControllerConfig, load_config, expand_env, DEFAULT_MODEL
from sentilight.errors import ConfigurationError


class TestControllerConfig:

    def test_defaults(self):
        config = ControllerConfig()
        assert config.model == DEFAULT_MODEL
        assert config.gemini_attempts == 2
        assert config.tasmota_attempts == 2
        assert config.gemini_retry_delay == 0.3
        assert config.tasmota_retry_delay == 0.2
        assert not config.has_api_key

    def test_is_immutable(self):
        config = ControllerConfig(api_key="k")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.api_key = "other"

    def test_reconfigure_returns_copy(self):
        config = ControllerConfig(api_key="k")
        changed = config.reconfigure(model="gemini-2.5-pro")

        assert config.model == DEFAULT_MODEL
        assert changed.model == "gemini-2.5-pro"
        assert changed.api_key == "k"

    def test_key_is_trimmed(self):
        assert ControllerConfig(api_key="  abc \n").api_key == "abc"

    def test_public_dict_hides_key(self):
        data = ControllerConfig(api_key="secret").to_public_dict()
        assert 'api_key' not in data
        assert data['has_api_key'] is True
        assert "secret" not in str(data)

    def test_from_dict(self):
        config = ControllerConfig.from_dict({
            'gemini': {'api_key': 'k', 'model': 'm', 'timeout': 5, 'attempts': 3},
            'tasmota': {'timeout': 2, 'retry_delay': 0.5},
            'controller': {'max_workers': 4, 'verbose': True},
        })
        assert config.api_key == 'k'
        assert config.model == 'm'
        assert config.gemini_timeout == 5.0
        assert config.gemini_attempts == 3
        assert config.tasmota_timeout == 2.0
        assert config.tasmota_retry_delay == 0.5
        assert config.max_workers == 4
        assert config.verbose is True

    def test_from_dict_reads_env_key(self, monkeypatch):
        monkeypatch.setenv('GEMINI_API_KEY', 'from-env')
        assert ControllerConfig.from_dict({}).api_key == 'from-env'

    @pytest.mark.parametrize("changes", [
        {"gemini_attempts": 0},
        {"tasmota_attempts": 0},
        {"tasmota_attempts": -1},
        {"max_workers": 0},
        {"gemini_attempts": 1.5},
        {"gemini_timeout": 0},
        {"tasmota_retry_delay": -0.1},
    ])
    def test_rejects_unusable_values(self, changes):
        with pytest.raises(ConfigurationError):
            ControllerConfig(api_key="k", **changes)
        with pytest.raises(ConfigurationError):
            ControllerConfig(api_key="k").reconfigure(**changes)

    def test_from_dict_rejects_zero_attempts(self):
        with pytest.raises(ConfigurationError):
            ControllerConfig.from_dict({'tasmota': {'attempts': 0}})


class TestLoadConfig:

    def test_env_expansion(self, monkeypatch):
        monkeypatch.setenv('SENTILIGHT_TEST_KEY', 'xyz')
        data = {'gemini': {'api_key': '${SENTILIGHT_TEST_KEY}', 'model': 'm'}, 'list': ['${SENTILIGHT_TEST_KEY}']}

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            yaml.dump(data, f)
            config_path = f.name

        try:
            loaded = load_config(config_path)
            assert loaded['gemini']['api_key'] == 'xyz'
            assert loaded['gemini']['model'] == 'm'
            assert loaded['list'] == ['xyz']
        finally:
            os.unlink(config_path)

    def test_missing_env_is_empty(self, monkeypatch):
        monkeypatch.delenv('SENTILIGHT_UNSET', raising=False)
        assert expand_env({'a': '${SENTILIGHT_UNSET}'}) == {'a': ''}

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            config_path = f.name
        try:
            assert load_config(config_path) == {}
        finally:
            os.unlink(config_path)

    def test_shipped_web_config_loads(self):
        path = os.path.join(os.path.dirname(__file__), '..', 'apps', 'web', 'config.yaml')
        config = ControllerConfig.from_dict(load_config(path))
        assert config.model == DEFAULT_MODEL
