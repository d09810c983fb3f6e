"""Projection of snapshot sequences into dated numeric series."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from gitpulse.core.models.derived import Series, SeriesPoint
from gitpulse.core.models.records import ReleaseAssetRow, Snapshot, StarHistoryPoint
from gitpulse.core.services.dedup import deduplicate_release_assets

TRAFFIC_SERIES: tuple[tuple[str, str], ...] = (
    ("views", "Views"),
    ("views_unique", "Unique Views"),
    ("clones", "Clones"),
    ("clones_unique", "Unique Clones"),
)


def _project(
    snapshots: Sequence[Snapshot],
    key: str,
    label: str,
    value: Callable[[Snapshot], int | None] | None = None,
) -> Series:
    getter = value or (lambda snapshot: getattr(snapshot, key))
    points = tuple(SeriesPoint(x=snapshot.date, y=getter(snapshot)) for snapshot in snapshots)
    return Series(key=key, label=label, points=points)


def build_growth_series(
    snapshots: Sequence[Snapshot],
    star_history: Sequence[StarHistoryPoint] | None = None,
) -> Series:
    """Star growth, preferring the denser star history when it has 2+ points."""

    if star_history and len(star_history) > 1:
        points = tuple(SeriesPoint(x=point.date, y=point.stars) for point in star_history)
        return Series(key="stars", label="Stars", points=points)
    return _project(snapshots, "stars", "Stars")


def has_traffic(snapshots: Sequence[Snapshot]) -> bool:
    """Traffic counts were collected for at least one day."""

    return any(snapshot.views is not None and snapshot.views > 0 for snapshot in snapshots)


def build_traffic_series(snapshots: Sequence[Snapshot]) -> tuple[Series, ...]:
    """Views and clones series; empty when no traffic was collected."""

    if not has_traffic(snapshots):
        return ()
    return tuple(_project(snapshots, key, label) for key, label in TRAFFIC_SERIES)


def build_downloads_series(snapshots: Sequence[Snapshot]) -> Series:
    """Cumulative release downloads per day."""

    return _project(snapshots, "releases_downloads", "Total Downloads")


def build_issue_series(snapshots: Sequence[Snapshot]) -> tuple[Series, Series]:
    """Open issue and open pull request counts per day."""

    return (
        _project(snapshots, "open_issues", "Open Issues"),
        _project(snapshots, "open_prs", "Open PRs"),
    )


def build_daily_downloads_series(rows: Sequence[ReleaseAssetRow]) -> Series:
    """Sum of per-asset download deltas for each collected day."""

    totals: dict[date, int] = {}
    for row in deduplicate_release_assets(rows):
        totals[row.date] = totals.get(row.date, 0) + row.downloads_delta
    points = tuple(SeriesPoint(x=day, y=totals[day]) for day in sorted(totals))
    return Series(key="downloads_delta", label="Downloads per Day", points=points)


__all__ = [
    "TRAFFIC_SERIES",
    "build_daily_downloads_series",
    "build_downloads_series",
    "build_growth_series",
    "build_issue_series",
    "build_traffic_series",
    "has_traffic",
]
