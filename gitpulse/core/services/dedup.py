"""First-seen deduplication of append-only feeds."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from datetime import date
from typing import TypeVar

from gitpulse.core.logging import get_logger
from gitpulse.core.models.records import PackageDownloadRow, ReleaseAssetRow

logger = get_logger(__name__)

RowT = TypeVar("RowT")
IdentityKey = Callable[[RowT], Hashable]


def release_asset_key(row: ReleaseAssetRow) -> tuple[date, str, str]:
    """Identity of a release asset observation."""
    return (row.date, row.tag, row.asset_name)


def package_row_key(row: PackageDownloadRow) -> tuple[date, str]:
    """Identity of a package download observation."""
    return (row.date, row.package)


def deduplicate(rows: Iterable[RowT], key: IdentityKey[RowT]) -> list[RowT]:
    """Keep the first row observed per identity key, preserving input order."""

    seen: set[Hashable] = set()
    unique: list[RowT] = []
    dropped = 0
    for row in rows:
        identity = key(row)
        if identity in seen:
            dropped += 1
            continue
        seen.add(identity)
        unique.append(row)

    if dropped:
        logger.debug("Dropped {} duplicate rows", dropped)
    return unique


def deduplicate_release_assets(rows: Iterable[ReleaseAssetRow]) -> list[ReleaseAssetRow]:
    return deduplicate(rows, release_asset_key)


def deduplicate_packages(rows: Iterable[PackageDownloadRow]) -> list[PackageDownloadRow]:
    return deduplicate(rows, package_row_key)


__all__ = [
    "IdentityKey",
    "deduplicate",
    "deduplicate_packages",
    "deduplicate_release_assets",
    "package_row_key",
    "release_asset_key",
]
