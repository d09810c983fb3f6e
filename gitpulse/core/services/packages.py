"""Package registry download rollups."""

from __future__ import annotations

from collections.abc import Sequence

from gitpulse.core.models.derived import PackageAggregate, PackageRollup, Series, SeriesPoint
from gitpulse.core.models.records import PackageDownloadRow
from gitpulse.core.services.dedup import deduplicate_packages


def build_package_series(rows: Sequence[PackageDownloadRow]) -> tuple[Series, ...]:
    """Weekly downloads per package, packages in first-seen order, dates ascending."""

    grouped: dict[str, list[PackageDownloadRow]] = {}
    for row in rows:
        grouped.setdefault(row.package, []).append(row)

    series: list[Series] = []
    for package, package_rows in grouped.items():
        ordered = sorted(package_rows, key=lambda row: row.date)
        points = tuple(SeriesPoint(x=row.date, y=row.weekly_downloads) for row in ordered)
        series.append(Series(key=package, label=package, points=points))
    return tuple(series)


def latest_package_aggregate(rows: Sequence[PackageDownloadRow]) -> PackageAggregate | None:
    """Totals across packages for the most recent date, ``None`` without data."""

    if not rows:
        return None
    latest = max(row.date for row in rows)
    latest_rows = [row for row in rows if row.date == latest]
    return PackageAggregate(
        date=latest,
        daily=sum(row.daily_downloads for row in latest_rows),
        weekly=sum(row.weekly_downloads for row in latest_rows),
        packages=tuple(dict.fromkeys(row.package for row in latest_rows)),
    )


def build_package_rollup(rows: Sequence[PackageDownloadRow]) -> PackageRollup:
    """Deduplicate the feed and compute both package views."""

    unique = deduplicate_packages(rows)
    return PackageRollup(series=build_package_series(unique), latest=latest_package_aggregate(unique))


__all__ = ["build_package_rollup", "build_package_series", "latest_package_aggregate"]
