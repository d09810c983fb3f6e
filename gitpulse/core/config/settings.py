"""Configuration management for gitpulse."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from gitpulse.core.exceptions import ConfigurationError

DEFAULT_PALETTE: tuple[str, ...] = (
    "rgb(59,130,246)",
    "rgb(16,185,129)",
    "rgb(249,115,22)",
    "rgb(139,92,246)",
    "rgb(236,72,153)",
    "rgb(234,179,8)",
    "rgb(6,182,212)",
    "rgb(244,63,94)",
    "rgb(168,85,247)",
    "rgb(34,197,94)",
)


@dataclass
class SourceConfig:
    """Dataset retrieval settings."""

    location: str = "data"
    timeout: float = 30.0
    max_retries: int = 2
    backoff_factor: float = 0.5

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", setting="source.timeout")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative", setting="source.max_retries")
        if self.backoff_factor < 0:
            raise ConfigurationError("backoff_factor must be non-negative", setting="source.backoff_factor")


@dataclass
class DisplayConfig:
    """Presentation settings consumed by renderers."""

    placeholder: str = "—"
    decimals: int = 1
    top_releases: int = 10
    palette: list[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))

    def __post_init__(self) -> None:
        if self.top_releases < 1:
            raise ConfigurationError("top_releases must be at least 1", setting="display.top_releases")
        if not self.palette:
            raise ConfigurationError("palette must not be empty", setting="display.palette")


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "WARNING"
    file: str | None = None


@dataclass
class GitPulseConfig:
    """Main gitpulse configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "GitPulseConfig":
        """Build a configuration from a nested dictionary."""
        try:
            return cls(
                source=SourceConfig(**config_dict.get("source", {})),
                display=DisplayConfig(**config_dict.get("display", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigurationError(f"Unknown configuration key: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Convert to a nested dictionary."""
        return {
            "source": asdict(self.source),
            "display": asdict(self.display),
            "logging": {k: v for k, v in asdict(self.logging).items() if v is not None},
        }


class ConfigManager:
    """Loads configuration from a TOML file merged with environment overrides."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        self.config_path = config_path or Path.home() / ".gitpulse" / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> GitPulseConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("Failed to load config from {}: {}", self.config_path, e)
                config_dict = {}

        if self.use_env:
            config_dict = _deep_update(config_dict, load_config_from_env())
        return GitPulseConfig.from_dict(config_dict)

    def get_config(self) -> GitPulseConfig:
        """Return the active configuration."""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(source={"timeout": 5})``."""
        self.config = GitPulseConfig.from_dict(_deep_update(self.config.to_dict(), updates))


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(dict(d.get(k, {})), v)
        else:
            d[k] = v
    return d


def get_default_config() -> GitPulseConfig:
    """Return the built-in defaults."""
    return GitPulseConfig()


def _env_number(name: str, cast: type) -> Any:
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", setting=name) from exc


def load_config_from_env() -> dict[str, Any]:
    """Read ``GITPULSE_*`` environment variables into a nested dictionary."""
    config: dict[str, Any] = {}

    source_config: dict[str, Any] = {}
    location = os.getenv("GITPULSE_SOURCE")
    if location:
        source_config["location"] = location
    timeout = _env_number("GITPULSE_TIMEOUT", float)
    if timeout is not None:
        source_config["timeout"] = timeout
    max_retries = _env_number("GITPULSE_MAX_RETRIES", int)
    if max_retries is not None:
        source_config["max_retries"] = max_retries
    if source_config:
        config["source"] = source_config

    display_config: dict[str, Any] = {}
    top_releases = _env_number("GITPULSE_TOP_RELEASES", int)
    if top_releases is not None:
        display_config["top_releases"] = top_releases
    if display_config:
        config["display"] = display_config

    logging_config: dict[str, Any] = {}
    level = os.getenv("GITPULSE_LOG_LEVEL")
    if level is not None:
        logging_config["level"] = level
    log_file = os.getenv("GITPULSE_LOG_FILE")
    if log_file is not None:
        logging_config["file"] = log_file
    if logging_config:
        config["logging"] = logging_config

    return config
