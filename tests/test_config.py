"""
Tests for the configuration manager
"""
import json

import pytest

from tuiman.utils.config_manager import AppConfig, ConfigManager
from tuiman.utils.errors import InvalidConfigError


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "config.json"


class TestLoading:
    """Tests for loading and creating the config file"""

    def test_defaults_written_on_first_run(self, config_path):
        manager = ConfigManager(config_path)

        assert config_path.exists()
        assert manager.config == AppConfig()
        data = json.loads(config_path.read_text())
        assert data["ui"]["split_ratio"] == 0.66
        assert data["secrets"]["backend"] == "auto"

    def test_existing_values_loaded(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"http": {"timeout": 5, "verify_tls": False}}))

        config = ConfigManager(config_path).config

        assert config.http.timeout == 5
        assert not config.http.verify_tls
        assert config.http.follow_redirects
        assert config.history.list_limit == 500

    def test_unknown_keys_ignored(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"theme": "dark"}))
        assert ConfigManager(config_path).config == AppConfig()

    def test_invalid_json(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")
        with pytest.raises(InvalidConfigError, match="not valid JSON"):
            ConfigManager(config_path)

    @pytest.mark.parametrize(
        "data",
        [
            {"ui": {"split_ratio": 0.95}},
            {"logging": {"level": "LOUD"}},
            {"secrets": {"backend": "vault"}},
            {"http": {"timeout": 0}},
        ],
    )
    def test_schema_violations(self, config_path, data):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps(data))
        with pytest.raises(InvalidConfigError, match="expected schema"):
            ConfigManager(config_path)


class TestUpdating:
    """Tests for set_config and reset_to_defaults"""

    def test_set_and_persist(self, config_path):
        manager = ConfigManager(config_path)
        manager.set_config("editor.command", "nano -w")

        assert ConfigManager(config_path).config.editor.command == "nano -w"

    def test_set_without_persist(self, config_path):
        manager = ConfigManager(config_path)
        manager.set_config("history.list_limit", 10, persist=False)

        assert manager.config.history.list_limit == 10
        assert ConfigManager(config_path).config.history.list_limit == 500

    @pytest.mark.parametrize("key_path", ["nope.value", "ui.nope", "version.inner"])
    def test_unknown_path(self, config_path, key_path):
        manager = ConfigManager(config_path)
        with pytest.raises(InvalidConfigError):
            manager.set_config(key_path, 1)

    def test_invalid_value(self, config_path):
        manager = ConfigManager(config_path)
        with pytest.raises(InvalidConfigError, match="ui.response_ratio"):
            manager.set_config("ui.response_ratio", 0.9)
        assert manager.config.ui.response_ratio == 0.28

    def test_reset(self, config_path):
        manager = ConfigManager(config_path)
        manager.set_config("http.timeout", 2.5)
        manager.reset_to_defaults()

        assert manager.config.http.timeout == 30.0
        assert ConfigManager(config_path).config == AppConfig()
