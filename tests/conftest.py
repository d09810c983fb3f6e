"""Pytest configuration and shared fixtures for the gitpulse test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitpulse.core.data.sources import RawDatasets

SNAPSHOT_CSV = """date,stars,forks,watchers,open_issues,open_prs,releases_downloads,views,views_unique,clones,clones_unique
2024-01-01,100,10,5,7,2,1000,,,,
2024-01-02,105,11,5,6,3,1200,40,12,4,2
2024-01-03,111,11,6,6,1,1500,55,20,0,0
"""

RELEASES_CSV = """date,tag,asset_name,asset_size,download_count,downloads_delta
2024-01-02,v1.0.0,app-linux.tar.gz,2048,300,0
2024-01-02,v1.1.0,app-linux.tar.gz,4096,100,0
2024-01-03,v1.0.0,app-linux.tar.gz,2048,320,20
2024-01-03,v1.0.0,app-macos.zip,1048576,80,5
2024-01-03,v1.1.0,app-linux.tar.gz,4096,150,50
2024-01-03,v1.1.0,app-linux.tar.gz,4096,999,999
2024-01-03,nightly,app-linux.tar.gz,512,7,1
"""

STAR_HISTORY_CSV = """date,stars
2023-06-01,10
2023-09-01,60
2024-01-01,100
"""

PACKAGES_CSV = """date,package,daily_downloads,weekly_downloads
2024-01-03,demo-cli,30,200
2024-01-02,demo-cli,20,150
2024-01-02,demo-core,5,40
2024-01-03,demo-core,8,60
"""


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--gitpulse-run-integration",
        action="store_true",
        default=False,
        help="Run gitpulse integration tests that require external services.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--gitpulse-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --gitpulse-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def raw_datasets() -> RawDatasets:
    return RawDatasets(
        snapshots=SNAPSHOT_CSV,
        releases=RELEASES_CSV,
        star_history=STAR_HISTORY_CSV,
        packages=PACKAGES_CSV,
    )


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Directory laid out as ``<root>/octo/demo/*.csv``."""

    repo_dir = tmp_path / "data" / "octo" / "demo"
    repo_dir.mkdir(parents=True)
    (repo_dir / "aggregate.csv").write_text(SNAPSHOT_CSV, encoding="utf-8")
    (repo_dir / "releases.csv").write_text(RELEASES_CSV, encoding="utf-8")
    (repo_dir / "star_history.csv").write_text(STAR_HISTORY_CSV, encoding="utf-8")
    (repo_dir / "packages.csv").write_text(PACKAGES_CSV, encoding="utf-8")
    return tmp_path / "data"
