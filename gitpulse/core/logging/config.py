"""Settings for the structured JSON log sinks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from gitpulse.core.config.settings import LoggingConfig

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LogConfig(BaseModel):
    """Where log records go and from which level on.

    ``console_stream`` defaults to stderr so that command output on stdout
    stays machine readable.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console_output: bool = True
    console_stream: Any = None
    file_path: str | None = None
    extra: dict[str, Any] = {}

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def file_output(self) -> bool:
        return self.file_path is not None

    @classmethod
    def from_settings(cls, settings: LoggingConfig, *, level: str | None = None, **overrides: Any) -> LogConfig:
        """Build sink settings from the ``[logging]`` section of the config."""

        return cls(level=level or settings.level, file_path=settings.file, **overrides)


__all__ = ["LEVELS", "LogConfig"]
