"""Release grouping and version-aware ranking."""

from __future__ import annotations

import re
from collections.abc import Sequence

from gitpulse.core.models.derived import Release, ReleaseAsset, ReleaseRanking
from gitpulse.core.models.records import ReleaseAssetRow
from gitpulse.core.services.dedup import deduplicate_release_assets

VersionKey = tuple[int, int, int]

DEFAULT_TOP_RELEASES = 10
UNVERSIONED: VersionKey = (0, 0, 0)

_VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")


def parse_version_key(tag: str) -> VersionKey:
    """Return the first ``major.minor.patch`` triple found anywhere in ``tag``.

    Tags without such a triple (``nightly``, ``v2``) map to ``(0, 0, 0)``.

    >>> parse_version_key("release-v1.10.2-beta")
    (1, 10, 2)
    >>> parse_version_key("nightly")
    (0, 0, 0)
    """

    match = _VERSION_PATTERN.search(tag)
    if match is None:
        return UNVERSIONED
    major, minor, patch = match.groups()
    return (int(major), int(minor), int(patch))


def latest_release_rows(rows: Sequence[ReleaseAssetRow]) -> list[ReleaseAssetRow]:
    """Rows belonging to the most recent collection date."""

    if not rows:
        return []
    latest = max(row.date for row in rows)
    return [row for row in rows if row.date == latest]


def group_releases(rows: Sequence[ReleaseAssetRow], *, sort_assets: bool = False) -> list[Release]:
    """Group asset rows by tag in first-seen order and total their downloads."""

    grouped: dict[str, list[ReleaseAsset]] = {}
    for row in rows:
        grouped.setdefault(row.tag, []).append(
            ReleaseAsset(
                name=row.asset_name,
                downloads=row.download_count,
                size=row.asset_size,
                delta=row.downloads_delta,
            )
        )

    releases: list[Release] = []
    for tag, assets in grouped.items():
        if sort_assets:
            assets = sorted(assets, key=lambda asset: (asset.name.casefold(), asset.name))
        releases.append(
            Release(tag=tag, assets=tuple(assets), total=sum(asset.downloads for asset in assets))
        )
    return releases


def order_releases(releases: Sequence[Release]) -> list[Release]:
    """Newest version first; equal versions fall back to the tag, descending."""

    return sorted(releases, key=lambda release: (parse_version_key(release.tag), release.tag), reverse=True)


def rank_releases(rows: Sequence[ReleaseAssetRow], limit: int = DEFAULT_TOP_RELEASES) -> list[Release]:
    """Top ``limit`` releases of the latest date for compact display."""

    latest = latest_release_rows(deduplicate_release_assets(rows))
    return order_releases(group_releases(latest))[:limit]


def release_details(rows: Sequence[ReleaseAssetRow]) -> list[Release]:
    """Every release of the latest date with assets sorted by name."""

    latest = latest_release_rows(deduplicate_release_assets(rows))
    return order_releases(group_releases(latest, sort_assets=True))


def build_release_ranking(
    rows: Sequence[ReleaseAssetRow],
    limit: int = DEFAULT_TOP_RELEASES,
) -> ReleaseRanking:
    """Both presentation variants for the latest collected date."""

    if not rows:
        return ReleaseRanking()
    return ReleaseRanking(
        date=max(row.date for row in rows),
        top=tuple(rank_releases(rows, limit)),
        details=tuple(release_details(rows)),
    )


__all__ = [
    "DEFAULT_TOP_RELEASES",
    "UNVERSIONED",
    "VersionKey",
    "build_release_ranking",
    "group_releases",
    "latest_release_rows",
    "order_releases",
    "parse_version_key",
    "rank_releases",
    "release_details",
]
