"""Configuration management module."""

from gitpulse.core.config.settings import (
    DEFAULT_PALETTE,
    ConfigManager,
    DisplayConfig,
    GitPulseConfig,
    LoggingConfig,
    SourceConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "DEFAULT_PALETTE",
    "ConfigManager",
    "DisplayConfig",
    "GitPulseConfig",
    "LoggingConfig",
    "SourceConfig",
    "get_default_config",
    "load_config_from_env",
]
