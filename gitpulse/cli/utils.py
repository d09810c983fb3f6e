"""Helpers shared by the dashboard commands: options, output streams and errors."""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, NoReturn, Sequence, TextIO

import typer

from gitpulse.core.config import GitPulseConfig
from gitpulse.core.exceptions import GitPulseError
from gitpulse.core.logging import current_trace_id

from .constants import VALIDATION_EXIT_CODE
from .formatters import Row, create_formatter


@dataclass(slots=True)
class CLIOptions:
    """Global options captured by the application callback."""

    format: str = "table"
    output_path: Path | None = None
    no_color: bool = False
    config: GitPulseConfig = field(default_factory=GitPulseConfig)


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    """Read :class:`CLIOptions` back from the Typer context object."""

    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        output_path=data.get("output_path"),
        no_color=bool(data.get("no_color", False)),
        config=data.get("config") or GitPulseConfig(),
    )


@contextmanager
def output_stream(options: CLIOptions) -> Iterator[TextIO]:
    """Yield the ``--output`` file, or stdout when none was given."""

    if options.output_path is None:
        yield sys.stdout
        return
    try:
        handle = open(options.output_path, "w", encoding="utf-8")
    except OSError as exc:
        emit_error(f"Unable to open '{options.output_path}': {exc}", "OUTPUT_WRITE_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    with handle:
        yield handle


def render_rows(
    ctx: typer.Context,
    rows: Sequence[Row],
    columns: Sequence[str],
    *,
    row_styles: Sequence[str | None] | None = None,
    title: str | None = None,
) -> None:
    """Render ``rows`` with the formatter selected by ``--format``."""

    options = get_cli_options(ctx)
    formatter = create_formatter(options.format, no_color=options.no_color)
    with output_stream(options) as stream:
        formatter.render(rows, stream=stream, columns=columns, row_styles=row_styles, title=title)


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr, tagged with the active trace id."""

    payload: dict[str, object] = {"code": code, "message": message, "trace_id": current_trace_id()}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def fail(error: GitPulseError, exit_code: int) -> NoReturn:
    """Report ``error`` on stderr and stop the command with ``exit_code``."""

    emit_error(error.message, error.error_code, details=error.details)
    raise typer.Exit(code=exit_code) from error


def _sanitize_details(details: Mapping[str, object]) -> dict[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, Mapping):
            sanitized[key] = _sanitize_details(value)
        elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            sanitized[key] = [str(item) for item in value]
        else:
            sanitized[key] = str(value)
    return sanitized


__all__ = ["CLIOptions", "emit_error", "fail", "get_cli_options", "output_stream", "render_rows"]
