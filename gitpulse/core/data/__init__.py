"""Parsing, normalization and retrieval of the raw datasets."""

from gitpulse.core.data.normalization import (
    normalize_packages,
    normalize_release_assets,
    normalize_snapshots,
    normalize_star_history,
)
from gitpulse.core.data.parsing import parse_table
from gitpulse.core.data.sources import (
    DatasetKind,
    DatasetSource,
    HttpDatasetSource,
    LocalDatasetSource,
    RawDatasets,
    RepoRef,
    create_source,
    fetch_datasets,
)

__all__ = [
    "DatasetKind",
    "DatasetSource",
    "HttpDatasetSource",
    "LocalDatasetSource",
    "RawDatasets",
    "RepoRef",
    "create_source",
    "fetch_datasets",
    "normalize_packages",
    "normalize_release_assets",
    "normalize_snapshots",
    "normalize_star_history",
    "parse_table",
]
