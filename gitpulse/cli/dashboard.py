"""Dashboard commands: render the derived views of one repository."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Sequence

import typer

from gitpulse.core.config import GitPulseConfig
from gitpulse.core.data.sources import RepoRef
from gitpulse.core.exceptions import DataValidationError, ErrorCode, GitPulseError, SourceError
from gitpulse.core.formatting import format_bytes, format_date_label, format_delta, format_number
from gitpulse.core.models import Dashboard, Release, Series, StatsView
from gitpulse.core.services.dashboard import DashboardService, format_policy

from .constants import NO_DATA_EXIT_CODE, SOURCE_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import emit_error, fail, get_cli_options, output_stream, render_rows

REPO_OPTION = typer.Option(..., "--repo", "-r", help="Repository as owner/name.")
SOURCE_OPTION = typer.Option(
    None,
    "--source",
    "-s",
    help="Base URL or directory holding <owner>/<name>/*.csv (overrides config).",
)


class SeriesName(str, Enum):
    GROWTH = "growth"
    TRAFFIC = "traffic"
    DOWNLOADS = "downloads"
    DAILY_DOWNLOADS = "daily-downloads"
    ISSUES = "issues"
    PACKAGES = "packages"


def register(app: typer.Typer) -> None:
    """Register dashboard commands on the provided application."""

    app.command("summary")(summary_command)
    app.command("releases")(releases_command)
    app.command("series")(series_command)
    app.command("packages")(packages_command)
    app.command("export")(export_command)


def get_dashboard_service(config: GitPulseConfig) -> DashboardService:
    """Factory hook for obtaining a :class:`DashboardService` instance."""

    return DashboardService(config)


def _load_dashboard(ctx: typer.Context, repo: str, source: str | None) -> Dashboard:
    config = get_cli_options(ctx).config
    if source:
        config = replace(config, source=replace(config.source, location=source))

    try:
        ref = RepoRef.parse(repo)
    except DataValidationError as error:
        fail(error, VALIDATION_EXIT_CODE)

    try:
        return asyncio.run(get_dashboard_service(config).load(ref))
    except SourceError as error:
        fail(error, SOURCE_EXIT_CODE)
    except GitPulseError as error:
        fail(error, SYSTEM_EXIT_CODE)


def _require_data(dashboard: Dashboard) -> StatsView:
    if not dashboard.available or dashboard.stats is None:
        emit_error(dashboard.message or "No data collected yet.", ErrorCode.NO_DATA.value, details={"repo": dashboard.repo})
        raise typer.Exit(code=NO_DATA_EXIT_CODE)
    return dashboard.stats


def summary_command(
    ctx: typer.Context,
    repo: str = REPO_OPTION,
    source: str | None = SOURCE_OPTION,
) -> None:
    """Show the headline metrics of the latest snapshot."""

    dashboard = _load_dashboard(ctx, repo, source)
    stats = _require_data(dashboard)

    day = stats.date.isoformat()
    rows = [
        {"metric": metric.label, "value": metric.display, "raw": metric.value, "date": day}
        for metric in stats.metrics
        if metric.present
    ]
    render_rows(ctx, rows, ["metric", "value", "raw", "date"], title=f"{dashboard.repo} on {day}")


def releases_command(
    ctx: typer.Context,
    repo: str = REPO_OPTION,
    source: str | None = SOURCE_OPTION,
    show_all: bool = typer.Option(False, "--all", help="List every release with its assets."),
) -> None:
    """Show release downloads for the latest collected day."""

    dashboard = _load_dashboard(ctx, repo, source)
    _require_data(dashboard)
    options = get_cli_options(ctx)
    policy = format_policy(options.config)

    if not show_all:
        rows = [
            {"tag": release.tag, "total": format_number(release.total, policy), "downloads": release.total}
            for release in dashboard.releases.top
        ]
        render_rows(ctx, rows, ["tag", "total", "downloads"], title="Top releases")
        return

    rows, styles = _release_detail_rows(dashboard.releases.details, options.config)
    render_rows(ctx, rows, ["tag", "asset", "size", "downloads", "delta"], row_styles=styles, title="Release assets")


def _release_detail_rows(
    releases: Sequence[Release],
    config: GitPulseConfig,
) -> tuple[list[dict[str, object]], list[str | None]]:
    policy = format_policy(config)
    palette = config.display.palette
    rows: list[dict[str, object]] = []
    styles: list[str | None] = []
    for release in releases:
        rows.append({"tag": release.tag, "asset": None, "size": None, "downloads": format_number(release.total, policy), "delta": None})
        styles.append("bold")
        for index, asset in enumerate(release.assets):
            rows.append(
                {
                    "tag": "",
                    "asset": asset.name,
                    "size": format_bytes(asset.size, policy),
                    "downloads": format_number(asset.downloads, policy),
                    "delta": format_delta(asset.delta),
                }
            )
            styles.append(palette[index % len(palette)])
    return rows, styles


def _series_for(dashboard: Dashboard, name: SeriesName) -> tuple[Series, ...]:
    bundle = dashboard.series
    single = {
        SeriesName.GROWTH: bundle.growth,
        SeriesName.DOWNLOADS: bundle.downloads,
        SeriesName.DAILY_DOWNLOADS: bundle.daily_downloads,
    }
    if name in single:
        series = single[name]
        return (series,) if series is not None else ()
    if name is SeriesName.TRAFFIC:
        return bundle.traffic
    if name is SeriesName.ISSUES:
        return bundle.issues
    return bundle.packages


def pivot_series(series: Sequence[Series]) -> tuple[list[dict[str, object]], list[str]]:
    """Align several series on their dates, one row per date."""

    by_date: dict[date, dict[str, object]] = {}
    for item in series:
        for point in item.points:
            row = by_date.setdefault(point.x, {"date": point.x.isoformat(), "label": format_date_label(point.x)})
            row[item.label] = point.y
    rows = [by_date[day] for day in sorted(by_date)]
    return rows, ["date", "label", *(item.label for item in series)]


def series_command(
    ctx: typer.Context,
    repo: str = REPO_OPTION,
    source: str | None = SOURCE_OPTION,
    name: SeriesName = typer.Option(SeriesName.GROWTH, "--name", "-n", help="Series family to show."),
) -> None:
    """Show one time-series family as a date-aligned table."""

    dashboard = _load_dashboard(ctx, repo, source)
    _require_data(dashboard)
    rows, columns = pivot_series(_series_for(dashboard, name))
    render_rows(ctx, rows, columns, title=name.value)


def packages_command(
    ctx: typer.Context,
    repo: str = REPO_OPTION,
    source: str | None = SOURCE_OPTION,
) -> None:
    """Show cross-package registry downloads for the latest day."""

    dashboard = _load_dashboard(ctx, repo, source)
    _require_data(dashboard)
    latest = dashboard.packages.latest
    rows: list[dict[str, object]] = []
    if latest is not None:
        rows.append(
            {
                "date": latest.date.isoformat(),
                "daily": latest.daily,
                "weekly": latest.weekly,
                "packages": ", ".join(latest.packages),
            }
        )
    render_rows(ctx, rows, ["date", "daily", "weekly", "packages"], title="Package downloads")


def export_command(
    ctx: typer.Context,
    repo: str = REPO_OPTION,
    source: str | None = SOURCE_OPTION,
) -> None:
    """Write the complete dashboard as a JSON document."""

    dashboard = _load_dashboard(ctx, repo, source)
    with output_stream(get_cli_options(ctx)) as stream:
        stream.write(dashboard.model_dump_json(indent=2))
        stream.write("\n")
        stream.flush()
    if not dashboard.available:
        raise typer.Exit(code=NO_DATA_EXIT_CODE)


__all__ = [
    "SeriesName",
    "export_command",
    "get_dashboard_service",
    "packages_command",
    "pivot_series",
    "register",
    "releases_command",
    "series_command",
    "summary_command",
]
