"""Structured JSON logging on top of loguru.

Every record carries a ``trace_id`` plus the ``repo`` and ``dataset`` it
concerns. Any other bound value is grouped under ``context``.
"""

from __future__ import annotations

import json
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger
from loguru._logger import Logger  # type: ignore[attr-defined]

from gitpulse.core.logging.config import LogConfig

_TRACE_ID_VAR: ContextVar[str | None] = ContextVar("gitpulse_trace_id", default=None)
_CONTEXT_VAR: ContextVar[dict[str, Any]] = ContextVar("gitpulse_log_context", default={})

PROMOTED_KEYS = ("repo", "dataset")


def _ensure_trace_id() -> str:
    trace_id = _TRACE_ID_VAR.get()
    if trace_id is None:
        trace_id = uuid4().hex
        _TRACE_ID_VAR.set(trace_id)
    return trace_id


def _patch_record(record: dict[str, Any]) -> None:
    extra = record.setdefault("extra", {})
    if extra.get("trace_id"):
        _TRACE_ID_VAR.set(extra["trace_id"])
    else:
        extra["trace_id"] = _ensure_trace_id()

    for key, value in _CONTEXT_VAR.get().items():
        if extra.get(key) is None:
            extra[key] = value
    for key in PROMOTED_KEYS:
        extra.setdefault(key, None)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_payload(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten a loguru record into the JSON document written by the sinks."""

    extra = record.get("extra", {})
    level = record.get("level")
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat() if "time" in record else datetime.now().isoformat(),
        "level": getattr(level, "name", None) or str(level or "INFO"),
        "message": record.get("message"),
        "trace_id": extra.get("trace_id"),
    }
    payload.update({key: extra.get(key) for key in PROMOTED_KEYS})

    context = {k: v for k, v in extra.items() if k not in {"trace_id", *PROMOTED_KEYS}}
    if context:
        payload["context"] = context
    if record.get("exception"):
        payload["exception"] = str(record["exception"])
    return payload


class JsonLineSink:
    """Writes one JSON document per record to a stream or appends it to a file."""

    def __init__(self, target: IO[str] | str | Path) -> None:
        self._stream: IO[str] | None = None
        self._path: Path | None = None
        if isinstance(target, (str, Path)):
            self._path = Path(target)
            self._path.parent.mkdir(parents=True, exist_ok=True)
        else:
            self._stream = target

    def __call__(self, message: Any) -> None:
        line = json.dumps(to_payload(message.record), default=_json_default) + "\n"
        if self._stream is not None:
            self._stream.write(line)
            self._stream.flush()
            return
        with open(self._path, "a", encoding="utf-8") as handle:  # type: ignore[arg-type]
            handle.write(line)


def _apply(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = []
    if config.console_output:
        handlers.append({"sink": JsonLineSink(config.console_stream or sys.stderr), "level": config.level})
    if config.file_output:
        handlers.append({"sink": JsonLineSink(config.file_path), "level": config.level})

    options: dict[str, Any] = {"handlers": handlers, "patcher": _patch_record}
    if config.extra:
        options["extra"] = config.extra
    logger.configure(**options)


def configure_logging(level: str = "INFO", **kwargs: Any) -> LogConfig:
    """Replace all sinks; returns the validated settings."""

    config = kwargs.pop("config", None) or LogConfig(level=level, **kwargs)
    _apply(config)
    return config


class StructuredLogger:
    """A configured loguru logger plus trace-aware context helpers."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self.config = config or LogConfig()
        _apply(self.config)
        self.logger: Logger = logger

    def configure(self, **kwargs: Any) -> None:
        self.config = LogConfig(**{**self.config.model_dump(), **kwargs})
        _apply(self.config)

    @contextmanager
    def context(self, *, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
        with log_context(trace_id=trace_id, **extra) as active_trace:
            yield active_trace


def get_logger(name: str | None = None) -> Logger:
    """Return the global logger, optionally bound to ``name``."""

    return logger.bind(logger_name=name) if name else logger


@contextmanager
def log_context(*, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
    """Attach a trace id and extra fields to every record logged inside the block."""

    context_token = _CONTEXT_VAR.set({**_CONTEXT_VAR.get(), **extra})
    active_trace = trace_id or uuid4().hex
    trace_token = _TRACE_ID_VAR.set(active_trace)
    try:
        yield active_trace
    finally:
        _TRACE_ID_VAR.reset(trace_token)
        _CONTEXT_VAR.reset(context_token)


@contextmanager
def log_duration(message: str, *, level: str = "DEBUG", **fields: Any) -> Iterator[None]:
    """Log ``message`` with an ``elapsed_ms`` field when the block completes without raising."""

    started = time.perf_counter()
    yield
    elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
    logger.log(level, message, elapsed_ms=elapsed_ms, **fields)


def current_trace_id() -> str:
    """Return the active trace id, generating one if required."""

    return _ensure_trace_id()


configure_logging(level="WARNING")


__all__ = [
    "JsonLineSink",
    "PROMOTED_KEYS",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "log_duration",
    "logger",
    "to_payload",
]
