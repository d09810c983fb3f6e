from datetime import date

from gitpulse.core.models.records import PackageDownloadRow
from gitpulse.core.services.packages import (
    build_package_rollup,
    build_package_series,
    latest_package_aggregate,
)

D1 = date(2024, 1, 1)
D2 = date(2024, 1, 2)


def _row(day: date, package: str, daily: int, weekly: int) -> PackageDownloadRow:
    return PackageDownloadRow(date=day, package=package, daily_downloads=daily, weekly_downloads=weekly)


ROWS = [
    _row(D2, "cli", 3, 30),
    _row(D1, "cli", 1, 10),
    _row(D1, "core", 2, 20),
    _row(D2, "core", 4, 40),
    _row(D1, "legacy", 9, 90),
]


def test_series_per_package_sorted_by_date() -> None:
    series = build_package_series(ROWS)

    assert [item.key for item in series] == ["cli", "core", "legacy"]
    assert [(point.x, point.y) for point in series[0].points] == [(D1, 10), (D2, 30)]
    assert [point.y for point in series[2].points] == [90]


def test_latest_aggregate_sums_latest_date_only() -> None:
    aggregate = latest_package_aggregate(ROWS)

    assert aggregate is not None
    assert aggregate.date == D2
    assert aggregate.daily == 7
    assert aggregate.weekly == 70
    assert aggregate.packages == ("cli", "core")


def test_empty_input_is_unavailable() -> None:
    rollup = build_package_rollup([])

    assert latest_package_aggregate([]) is None
    assert rollup.available is False
    assert rollup.series == ()


def test_rollup_deduplicates_repeated_rows() -> None:
    rollup = build_package_rollup(ROWS + [_row(D2, "cli", 100, 1000)])

    assert rollup.available is True
    assert rollup.latest is not None
    assert rollup.latest.weekly == 70
