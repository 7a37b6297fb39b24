"""Tests for configuration loading and management."""

import pytest

from subscription_registry.config import Config, ConfigurationError, get_config
from subscription_registry.models import ANONYMOUS_IDENTITY, DEFAULT_EXPIRY_WINDOW


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "registry.yaml"
    path.write_text(
        "registry:\n"
        "  expiry_window: 86400\n"
        "host:\n"
        "  clock: virtual\n"
        "  caller_header: X-Principal\n"
        "  allow_anonymous: false\n",
        encoding="utf-8",
    )
    return path


class TestConfigurationLoading:
    def test_loads_values_from_file(self, config_file):
        config = Config(str(config_file))

        assert config.config_path == config_file
        assert config.expiry_window == 86400
        assert config.clock_mode == "virtual"
        assert config.host_settings.caller_header == "X-Principal"
        assert config.host_settings.allow_anonymous is False
        assert config.host_settings.anonymous_identity == ANONYMOUS_IDENTITY

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("host:\n  clock: virtual\n", encoding="utf-8")

        config = Config(str(path))

        assert config.expiry_window == DEFAULT_EXPIRY_WINDOW
        assert config.clock_mode == "virtual"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("", encoding="utf-8")

        assert Config(str(path)).expiry_window == DEFAULT_EXPIRY_WINDOW

    def test_env_var_path(self, config_file, monkeypatch):
        monkeypatch.setenv("REGISTRY_CONFIG_PATH", str(config_file))
        assert Config().expiry_window == 86400

    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("REGISTRY_CONFIG_PATH", raising=False)
        monkeypatch.chdir(tmp_path)

        config = Config()

        assert config.expiry_window == DEFAULT_EXPIRY_WINDOW
        assert config.clock_mode == "system"
        assert config.host_settings.caller_header == "X-Caller-Identity"


class TestConfigurationErrors:
    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            Config(str(tmp_path / "missing.yaml"))
        assert "not found" in str(exc_info.value)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("registry: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            Config(str(path))
        assert "YAML" in str(exc_info.value)

    def test_invalid_clock_mode_raises(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("host:\n  clock: sundial\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            Config(str(path))
        assert "validation failed" in str(exc_info.value)

    def test_negative_expiry_window_raises(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("registry:\n  expiry_window: -5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            Config(str(path))
        assert "expiry_window" in str(exc_info.value)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Config(str(path))


class TestRepositoryConfig:
    def test_shipped_config_matches_defaults(self):
        """config/registry.yaml carries the fixed expiry window."""
        config = get_config()
        assert config.expiry_window == DEFAULT_EXPIRY_WINDOW
        assert get_config() is config
