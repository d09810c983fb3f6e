"""Transformation services."""

from gitpulse.core.services.dashboard import DashboardService, build_dashboard
from gitpulse.core.services.dedup import deduplicate
from gitpulse.core.services.packages import build_package_rollup
from gitpulse.core.services.releases import build_release_ranking, parse_version_key
from gitpulse.core.services.snapshot import build_stats_view, latest_snapshot

__all__ = [
    "DashboardService",
    "build_dashboard",
    "build_package_rollup",
    "build_release_ranking",
    "build_stats_view",
    "deduplicate",
    "latest_snapshot",
    "parse_version_key",
]
