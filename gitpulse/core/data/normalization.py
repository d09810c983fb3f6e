"""Per-shape coercion of raw string records into typed models."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from gitpulse.core.models.records import (
    PackageDownloadRow,
    RawRecord,
    ReleaseAssetRow,
    Snapshot,
    StarHistoryPoint,
)

_LEADING_INT = re.compile(r"^[+-]?\d+")

ModelT = TypeVar("ModelT", bound=BaseModel)
Coercer = Callable[[str], Any]
NormalizationTable = Mapping[str, tuple[str, Coercer]]


def coerce_optional_int(value: str | None) -> int | None:
    """Parse the leading integer of ``value``; ``None`` when there is none."""

    if value is None:
        return None
    match = _LEADING_INT.match(value.strip())
    if match is None:
        return None
    return int(match.group(0))


def coerce_int(value: str | None) -> int:
    """Parse the leading integer of ``value``, defaulting to ``0``."""

    parsed = coerce_optional_int(value)
    return 0 if parsed is None else parsed


def coerce_date(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD`` (or the date part of an ISO timestamp)."""

    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def coerce_text(value: str | None) -> str:
    return value or ""


SNAPSHOT_FIELDS: NormalizationTable = {
    "stars": ("stars", coerce_int),
    "forks": ("forks", coerce_int),
    "watchers": ("watchers", coerce_int),
    "open_issues": ("open_issues", coerce_int),
    "open_prs": ("open_prs", coerce_int),
    "releases_downloads": ("releases_downloads", coerce_int),
    "views": ("views", coerce_optional_int),
    "views_unique": ("views_unique", coerce_optional_int),
    "clones": ("clones", coerce_optional_int),
    "clones_unique": ("clones_unique", coerce_optional_int),
}

RELEASE_ASSET_FIELDS: NormalizationTable = {
    "tag": ("tag", coerce_text),
    "asset_name": ("asset_name", coerce_text),
    "asset_size": ("asset_size", coerce_int),
    "download_count": ("download_count", coerce_int),
    "downloads_delta": ("downloads_delta", coerce_int),
}

STAR_HISTORY_FIELDS: NormalizationTable = {
    "stars": ("stars", coerce_int),
}

PACKAGE_FIELDS: NormalizationTable = {
    "package": ("package", coerce_text),
    "daily_downloads": ("daily_downloads", coerce_int),
    "weekly_downloads": ("weekly_downloads", coerce_int),
}


def normalize_records(
    records: Iterable[RawRecord],
    model: type[ModelT],
    table: NormalizationTable,
    *,
    date_column: str = "date",
) -> list[ModelT]:
    """Apply ``table`` to every record and build ``model`` instances.

    Rows whose date cannot be parsed are skipped; every other malformed value
    falls back to the coercer's default.
    """

    normalized: list[ModelT] = []
    skipped = 0
    for index, record in enumerate(records):
        day = coerce_date(record.get(date_column))
        if day is None:
            skipped += 1
            logger.warning(
                "Skipping row without a valid date",
                row=index,
                model=model.__name__,
                value=record.get(date_column),
            )
            continue
        fields = {name: coercer(record.get(column, "")) for name, (column, coercer) in table.items()}
        normalized.append(model(date=day, **fields))

    if skipped:
        logger.info("Normalized {} {} rows, skipped {}", len(normalized), model.__name__, skipped)
    return normalized


def normalize_snapshots(records: Iterable[RawRecord]) -> list[Snapshot]:
    """Normalize snapshot rows and order them chronologically (stable)."""

    snapshots = normalize_records(records, Snapshot, SNAPSHOT_FIELDS)
    return sorted(snapshots, key=lambda snapshot: snapshot.date)


def normalize_release_assets(records: Iterable[RawRecord]) -> list[ReleaseAssetRow]:
    return normalize_records(records, ReleaseAssetRow, RELEASE_ASSET_FIELDS)


def normalize_star_history(records: Iterable[RawRecord]) -> list[StarHistoryPoint]:
    return normalize_records(records, StarHistoryPoint, STAR_HISTORY_FIELDS)


def normalize_packages(records: Iterable[RawRecord]) -> list[PackageDownloadRow]:
    return normalize_records(records, PackageDownloadRow, PACKAGE_FIELDS)


__all__ = [
    "NormalizationTable",
    "SNAPSHOT_FIELDS",
    "RELEASE_ASSET_FIELDS",
    "STAR_HISTORY_FIELDS",
    "PACKAGE_FIELDS",
    "coerce_date",
    "coerce_int",
    "coerce_optional_int",
    "coerce_text",
    "normalize_records",
    "normalize_snapshots",
    "normalize_release_assets",
    "normalize_star_history",
    "normalize_packages",
]
