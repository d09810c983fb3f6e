"""Data models module."""

from gitpulse.core.models.derived import (
    Dashboard,
    DashboardStatus,
    PackageAggregate,
    PackageRollup,
    Release,
    ReleaseAsset,
    ReleaseRanking,
    Series,
    SeriesBundle,
    SeriesPoint,
    StatMetric,
    StatsView,
)
from gitpulse.core.models.records import (
    PackageDownloadRow,
    RawRecord,
    ReleaseAssetRow,
    Snapshot,
    StarHistoryPoint,
)

__all__ = [
    "RawRecord",
    "Snapshot",
    "ReleaseAssetRow",
    "StarHistoryPoint",
    "PackageDownloadRow",
    "SeriesPoint",
    "Series",
    "SeriesBundle",
    "ReleaseAsset",
    "Release",
    "ReleaseRanking",
    "PackageAggregate",
    "PackageRollup",
    "StatMetric",
    "StatsView",
    "DashboardStatus",
    "Dashboard",
]
