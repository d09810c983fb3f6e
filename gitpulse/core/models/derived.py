"""Derived views handed to renderers."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class SeriesPoint(BaseModel):
    """Single ``(x, y)`` observation."""

    model_config = ConfigDict(frozen=True)

    x: dt.date
    y: int | None

    @field_serializer("x", when_used="json")
    def serialize_date(self, value: dt.date) -> str:
        """Serialize date to isoformat string."""
        return value.isoformat()


class Series(BaseModel):
    """Named numeric series aligned to calendar days."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    points: tuple[SeriesPoint, ...] = ()


class ReleaseAsset(BaseModel):
    """Per-asset figures within a release."""

    model_config = ConfigDict(frozen=True)

    name: str
    downloads: int
    size: int
    delta: int


class Release(BaseModel):
    """All assets tracked for one release tag on the latest date."""

    model_config = ConfigDict(frozen=True)

    tag: str
    assets: tuple[ReleaseAsset, ...]
    total: int


class ReleaseRanking(BaseModel):
    """Compact top-N ranking plus the full per-asset listing."""

    model_config = ConfigDict(frozen=True)

    date: dt.date | None = None
    top: tuple[Release, ...] = ()
    details: tuple[Release, ...] = ()

    @property
    def available(self) -> bool:
        return bool(self.details)


class PackageAggregate(BaseModel):
    """Cross-package totals for the latest collected day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    daily: int
    weekly: int
    packages: tuple[str, ...]


class PackageRollup(BaseModel):
    """Per-package weekly series and the latest-date aggregate."""

    model_config = ConfigDict(frozen=True)

    series: tuple[Series, ...] = ()
    latest: PackageAggregate | None = None

    @property
    def available(self) -> bool:
        return self.latest is not None


class StatMetric(BaseModel):
    """Scalar headline metric with its display string."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    value: int | None
    display: str
    present: bool = True


class StatsView(BaseModel):
    """Headline metrics taken from the latest snapshot."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    metrics: tuple[StatMetric, ...]

    def get(self, key: str) -> StatMetric | None:
        """Return the metric named ``key`` if it exists."""
        for metric in self.metrics:
            if metric.key == key:
                return metric
        return None


class SeriesBundle(BaseModel):
    """Every time series the dashboard draws."""

    model_config = ConfigDict(frozen=True)

    growth: Series | None = None
    traffic: tuple[Series, ...] = ()
    downloads: Series | None = None
    daily_downloads: Series | None = None
    issues: tuple[Series, ...] = ()
    packages: tuple[Series, ...] = ()


class DashboardStatus(str, Enum):
    """Whether any data has been collected for the repository."""

    READY = "ready"
    NO_DATA = "no_data"


class Dashboard(BaseModel):
    """Complete derived view for one repository."""

    model_config = ConfigDict(frozen=True)

    repo: str | None = None
    status: DashboardStatus
    message: str | None = None
    stats: StatsView | None = None
    has_traffic: bool = False
    series: SeriesBundle = Field(default_factory=SeriesBundle)
    releases: ReleaseRanking = Field(default_factory=ReleaseRanking)
    packages: PackageRollup = Field(default_factory=PackageRollup)

    @property
    def available(self) -> bool:
        return self.status is DashboardStatus.READY


__all__ = [
    "SeriesPoint",
    "Series",
    "ReleaseAsset",
    "Release",
    "ReleaseRanking",
    "PackageAggregate",
    "PackageRollup",
    "StatMetric",
    "StatsView",
    "SeriesBundle",
    "DashboardStatus",
    "Dashboard",
]
