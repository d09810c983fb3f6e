"""Typed record shapes produced by the normalizer."""

import datetime as dt

from pydantic import BaseModel, ConfigDict

RawRecord = dict[str, str]


class Snapshot(BaseModel):
    """Daily repository snapshot."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    open_issues: int = 0
    open_prs: int = 0
    releases_downloads: int = 0
    # traffic fields; None means "not collected", which differs from zero
    views: int | None = None
    views_unique: int | None = None
    clones: int | None = None
    clones_unique: int | None = None


class ReleaseAssetRow(BaseModel):
    """Cumulative download counter for one release asset on one day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    tag: str
    asset_name: str
    asset_size: int = 0
    download_count: int = 0
    downloads_delta: int = 0


class StarHistoryPoint(BaseModel):
    """Reconstructed historical star count."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    stars: int = 0


class PackageDownloadRow(BaseModel):
    """Registry download counts for one package on one day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    package: str
    daily_downloads: int = 0
    weekly_downloads: int = 0


__all__ = [
    "RawRecord",
    "Snapshot",
    "ReleaseAssetRow",
    "StarHistoryPoint",
    "PackageDownloadRow",
]
