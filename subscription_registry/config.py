"""Configuration management - loads registry.yaml and environment variables."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from subscription_registry.models import HostSettings, RegistryConfig, RegistrySettings

DEFAULT_CONFIG_PATH = Path("config/registry.yaml")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


class Config:
    """Application configuration loader and manager.

    Loads registry.yaml and provides validated access to:
    - Registry settings (expiry window)
    - Host settings (clock mode, caller identity header)
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to registry.yaml file. If not provided, uses REGISTRY_CONFIG_PATH
                        env var or defaults to ./config/registry.yaml
        """
        self._explicit = bool(config_path or os.getenv("REGISTRY_CONFIG_PATH"))
        self._config_path = self._resolve_config_path(config_path)
        self._registry_config: Optional[RegistryConfig] = None
        self._load_config()

    def _resolve_config_path(self, config_path: Optional[str]) -> Path:
        """Resolve configuration file path from argument, env var, or default."""
        if config_path:
            return Path(config_path)

        env_path = os.getenv("REGISTRY_CONFIG_PATH")
        if env_path:
            return Path(env_path)

        return DEFAULT_CONFIG_PATH

    def _load_config(self) -> None:
        """Load and validate registry.yaml configuration.

        A missing default file yields built-in defaults; a missing file that was
        asked for explicitly is an error.
        """
        if not self._config_path.exists():
            if self._explicit:
                raise ConfigurationError(
                    f"Configuration file not found: {self._config_path}\n"
                    f"Please create it or unset REGISTRY_CONFIG_PATH"
                )
            self._registry_config = RegistryConfig()
            return

        try:
            with open(self._config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration: {e}") from e

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {self._config_path}"
            )

        try:
            self._registry_config = RegistryConfig(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    @property
    def settings(self) -> RegistryConfig:
        """Get validated configuration."""
        if self._registry_config is None:
            raise ConfigurationError("Configuration not loaded")
        return self._registry_config

    @property
    def config_path(self) -> Path:
        """Get path to configuration file."""
        return self._config_path

    @property
    def registry_settings(self) -> RegistrySettings:
        return self.settings.registry

    @property
    def host_settings(self) -> HostSettings:
        return self.settings.host

    @property
    def expiry_window(self) -> int:
        """Get the fixed expiry window.

        Returns:
            Time units added to expiry at creation and on renewal (e.g., 2592000)
        """
        return self.registry_settings.expiry_window

    @property
    def clock_mode(self) -> str:
        """Get clock mode ('system' or 'virtual')."""
        return self.host_settings.clock


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """Get global configuration instance (singleton).

    Args:
        config_path: Optional path to configuration file (only used on first call)

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_path)
    return _config_instance
