from datetime import date

from gitpulse.core.formatting import FormatPolicy
from gitpulse.core.models.derived import PackageAggregate
from gitpulse.core.models.records import Snapshot
from gitpulse.core.services.snapshot import build_stats_view, latest_snapshot


def _snapshots() -> list[Snapshot]:
    return [
        Snapshot(date=date(2024, 1, 1), stars=1),
        Snapshot(date=date(2024, 1, 2), stars=1500, forks=12, views=2_500_000, releases_downloads=999),
    ]


def test_latest_snapshot_is_last_element() -> None:
    assert latest_snapshot(_snapshots()).date == date(2024, 1, 2)
    assert latest_snapshot([]) is None


def test_empty_sequence_has_no_stats_view() -> None:
    assert build_stats_view([]) is None


def test_core_metrics_are_formatted() -> None:
    view = build_stats_view(_snapshots())

    assert view is not None
    assert view.date == date(2024, 1, 2)
    assert view.get("stars").display == "1.5K"
    assert view.get("forks").display == "12"
    assert view.get("releases_downloads").display == "999"
    assert view.get("open_prs").value == 0
    assert view.get("open_prs").display == "0"


def test_optional_metrics_follow_their_own_detection() -> None:
    view = build_stats_view(_snapshots(), traffic=False, packages=None)

    assert view.get("views").present is False
    assert view.get("views").display == "—"
    assert view.get("package_weekly_downloads").present is False

    aggregate = PackageAggregate(date=date(2024, 1, 2), daily=5, weekly=4200, packages=("demo",))
    view = build_stats_view(_snapshots(), traffic=True, packages=aggregate)

    assert view.get("views").present is True
    assert view.get("views").display == "2.5M"
    assert view.get("package_weekly_downloads").display == "4.2K"
    assert len(view.metrics) == 8


def test_policy_controls_placeholder() -> None:
    view = build_stats_view(_snapshots(), policy=FormatPolicy(placeholder="n/a"))

    assert view.get("views").display == "n/a"
