"""Main entry point for the gitpulse command line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from gitpulse.core.config import ConfigManager
from gitpulse.core.exceptions import ConfigurationError
from gitpulse.core.logging import LogConfig, configure_logging

from .constants import VALIDATION_EXIT_CODE
from .dashboard import register as register_dashboard_commands
from .formatters import FORMATTERS, create_formatter
from .utils import fail


def _print_version(value: bool) -> None:
    if value:
        from gitpulse import __version__

        typer.echo(f"gitpulse {__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create a Typer application instance for gitpulse."""

    app = typer.Typer(add_completion=False, help="Dashboard views over collected repository metrics.")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help=f"Output format ({' or '.join(FORMATTERS)}).",
            show_default=True,
        ),
        output: Path | None = typer.Option(None, "--output", "-o", help="Write output to a file instead of stdout."),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            help="TOML configuration file [default: ~/.gitpulse/config.toml].",
        ),
        log_level: str | None = typer.Option(None, "--log-level", help="Override the configured log level."),
        no_color: bool = typer.Option(False, "--no-color", help="Disable colorized table output."),
        version: bool = typer.Option(
            False,
            "--version",
            callback=_print_version,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        try:
            config = ConfigManager(config_path).get_config()
        except ConfigurationError as error:
            fail(error, VALIDATION_EXIT_CODE)

        try:
            log_config = LogConfig.from_settings(config.logging, level=log_level)
        except ValidationError as exc:
            raise typer.BadParameter(f"Unknown log level '{log_level or config.logging.level}'", param_hint="--log-level") from exc
        configure_logging(config=log_config)

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "no_color": no_color,
                "config": config,
            }
        )

    register_dashboard_commands(app)
    return app


app = create_app()
