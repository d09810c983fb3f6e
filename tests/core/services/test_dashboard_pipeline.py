from __future__ import annotations

from datetime import date
from pathlib import Path

import httpx
import pytest

from gitpulse.core.config import GitPulseConfig, SourceConfig
from gitpulse.core.data.sources import HttpDatasetSource, LocalDatasetSource, RawDatasets
from gitpulse.core.exceptions import NetworkError
from gitpulse.core.models import DashboardStatus
from gitpulse.core.services.dashboard import NO_DATA_MESSAGE, DashboardService, build_dashboard


def test_full_dashboard(raw_datasets: RawDatasets) -> None:
    dashboard = build_dashboard(raw_datasets, repo="octo/demo")

    assert dashboard.status is DashboardStatus.READY
    assert dashboard.available is True
    assert dashboard.has_traffic is True
    assert dashboard.stats is not None
    assert dashboard.stats.get("stars").value == 111
    assert dashboard.stats.get("releases_downloads").display == "1.5K"
    assert dashboard.stats.get("views").display == "55"
    assert dashboard.stats.get("package_weekly_downloads").value == 260

    assert [point.y for point in dashboard.series.growth.points] == [10, 60, 100]
    assert len(dashboard.series.traffic) == 4
    assert [point.y for point in dashboard.series.downloads.points] == [1000, 1200, 1500]
    assert [point.y for point in dashboard.series.daily_downloads.points] == [0, 76]
    assert [series.label for series in dashboard.series.issues] == ["Open Issues", "Open PRs"]

    assert dashboard.releases.date == date(2024, 1, 3)
    assert [(r.tag, r.total) for r in dashboard.releases.top] == [("v1.1.0", 150), ("v1.0.0", 400), ("nightly", 7)]

    assert dashboard.packages.latest is not None
    assert dashboard.packages.latest.daily == 38
    assert dashboard.packages.latest.packages == ("demo-cli", "demo-core")
    assert [series.key for series in dashboard.series.packages] == ["demo-cli", "demo-core"]


def test_empty_primary_dataset_signals_no_data() -> None:
    dashboard = build_dashboard(RawDatasets(snapshots="date,stars\n", releases="date,tag\n2024-01-01,v1.0.0"))

    assert dashboard.status is DashboardStatus.NO_DATA
    assert dashboard.available is False
    assert dashboard.stats is None
    assert dashboard.message == NO_DATA_MESSAGE


def test_no_data_is_distinguishable_from_zero_metrics() -> None:
    zeros = build_dashboard(RawDatasets(snapshots="date,stars,forks\n2024-01-01,0,0\n"))
    missing = build_dashboard(RawDatasets(snapshots=None))

    assert zeros.available is True
    assert zeros.stats is not None
    assert zeros.stats.get("stars").value == 0
    assert missing.available is False
    assert missing.stats is None


def test_optional_datasets_missing_only_empty_their_sections(raw_datasets: RawDatasets) -> None:
    datasets = RawDatasets(snapshots=raw_datasets.snapshots)

    dashboard = build_dashboard(datasets)

    assert dashboard.available is True
    assert dashboard.releases.available is False
    assert dashboard.packages.available is False
    assert dashboard.series.daily_downloads is None
    assert dashboard.series.packages == ()
    assert len(dashboard.series.growth.points) == 3
    assert dashboard.stats.get("package_weekly_downloads").present is False


def test_top_release_limit_comes_from_config(raw_datasets: RawDatasets) -> None:
    config = GitPulseConfig()
    config.display.top_releases = 1

    dashboard = build_dashboard(raw_datasets, config)

    assert [release.tag for release in dashboard.releases.top] == ["v1.1.0"]
    assert len(dashboard.releases.details) == 3


def test_rebuilding_is_byte_identical(raw_datasets: RawDatasets) -> None:
    first = build_dashboard(raw_datasets, repo="octo/demo").model_dump_json()
    second = build_dashboard(raw_datasets, repo="octo/demo").model_dump_json()

    assert first == second


@pytest.mark.asyncio
async def test_service_loads_from_configured_location(data_root: Path) -> None:
    config = GitPulseConfig(source=SourceConfig(location=str(data_root)))

    dashboard = await DashboardService(config).load("octo/demo")

    assert dashboard.repo == "octo/demo"
    assert dashboard.available is True


@pytest.mark.asyncio
async def test_service_with_injected_source_and_missing_repo(data_root: Path) -> None:
    service = DashboardService(source=LocalDatasetSource(data_root))

    dashboard = await service.load("octo/unknown")

    assert dashboard.status is DashboardStatus.NO_DATA


def test_byte_order_mark_does_not_hide_snapshots() -> None:
    dashboard = build_dashboard(RawDatasets(snapshots="\ufeffdate,stars\n2024-01-01,5\n"))

    assert dashboard.status is DashboardStatus.READY
    assert dashboard.stats.get("stars").value == 5


@pytest.mark.asyncio
async def test_unreachable_snapshots_raise_instead_of_no_data() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    config = SourceConfig(location="https://data.example", max_retries=0, backoff_factor=0)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = DashboardService(source=HttpDatasetSource("https://data.example", config, client=client))

    with pytest.raises(NetworkError):
        await service.load("octo/demo")


@pytest.mark.asyncio
async def test_absent_snapshots_still_mean_no_data() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    config = SourceConfig(location="https://data.example", max_retries=0, backoff_factor=0)
    service = DashboardService(source=HttpDatasetSource("https://data.example", config, client=client))

    dashboard = await service.load("octo/demo")

    assert dashboard.status is DashboardStatus.NO_DATA
