"""Current headline metrics from the snapshot feed."""

from __future__ import annotations

from collections.abc import Sequence

from gitpulse.core.formatting import DEFAULT_POLICY, FormatPolicy, format_number
from gitpulse.core.models.derived import PackageAggregate, StatMetric, StatsView
from gitpulse.core.models.records import Snapshot

CORE_METRICS: tuple[tuple[str, str], ...] = (
    ("stars", "Stars"),
    ("forks", "Forks"),
    ("watchers", "Watchers"),
    ("releases_downloads", "Downloads"),
    ("open_issues", "Open Issues"),
    ("open_prs", "Open PRs"),
)


def latest_snapshot(snapshots: Sequence[Snapshot]) -> Snapshot | None:
    """The last element of a chronological snapshot sequence."""

    return snapshots[-1] if snapshots else None


def _metric(key: str, label: str, value: int | None, policy: FormatPolicy, *, present: bool = True) -> StatMetric:
    display = format_number(value, policy) if present else policy.placeholder
    return StatMetric(key=key, label=label, value=value if present else None, display=display, present=present)


def build_stats_view(
    snapshots: Sequence[Snapshot],
    *,
    traffic: bool = False,
    packages: PackageAggregate | None = None,
    policy: FormatPolicy = DEFAULT_POLICY,
) -> StatsView | None:
    """Headline metrics; ``None`` when nothing has been collected.

    Views and weekly package downloads are only flagged present when their
    own families were detected by the caller.
    """

    latest = latest_snapshot(snapshots)
    if latest is None:
        return None

    metrics = [_metric(key, label, getattr(latest, key), policy) for key, label in CORE_METRICS]
    metrics.append(_metric("views", "Views", latest.views, policy, present=traffic))
    metrics.append(
        _metric(
            "package_weekly_downloads",
            "Weekly Package Downloads",
            packages.weekly if packages else None,
            policy,
            present=packages is not None,
        )
    )
    return StatsView(date=latest.date, metrics=tuple(metrics))


__all__ = ["CORE_METRICS", "build_stats_view", "latest_snapshot"]
