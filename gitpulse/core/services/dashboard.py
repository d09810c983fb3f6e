"""End-to-end dashboard pipeline."""

from __future__ import annotations

from gitpulse.core.config.settings import GitPulseConfig
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
    RawDatasets,
    RepoRef,
    create_source,
    fetch_datasets,
)
from gitpulse.core.formatting import FormatPolicy
from gitpulse.core.logging import get_logger
from gitpulse.core.models.derived import Dashboard, DashboardStatus, SeriesBundle
from gitpulse.core.services.packages import build_package_rollup
from gitpulse.core.services.releases import build_release_ranking
from gitpulse.core.services.snapshot import build_stats_view
from gitpulse.core.services.timeseries import (
    build_daily_downloads_series,
    build_downloads_series,
    build_growth_series,
    build_issue_series,
    build_traffic_series,
    has_traffic,
)

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No data collected yet. Run the collector workflow first."


def format_policy(config: GitPulseConfig) -> FormatPolicy:
    """Formatting policy derived from the display settings."""
    return FormatPolicy(placeholder=config.display.placeholder, decimals=config.display.decimals)


def build_dashboard(
    datasets: RawDatasets,
    config: GitPulseConfig | None = None,
    *,
    repo: str | None = None,
) -> Dashboard:
    """Run the pure transformation pipeline over already retrieved datasets.

    An empty or missing snapshot dataset yields a ``no_data`` dashboard; every
    other missing dataset only empties its own section.
    """

    config = config or GitPulseConfig()
    snapshots = normalize_snapshots(parse_table(datasets.snapshots))
    if not snapshots:
        logger.info("No snapshots collected", repo=repo)
        return Dashboard(repo=repo, status=DashboardStatus.NO_DATA, message=NO_DATA_MESSAGE)

    release_rows = normalize_release_assets(parse_table(datasets.releases))
    star_history = normalize_star_history(parse_table(datasets.star_history))
    package_rows = normalize_packages(parse_table(datasets.packages))

    traffic = has_traffic(snapshots)
    packages = build_package_rollup(package_rows)
    series = SeriesBundle(
        growth=build_growth_series(snapshots, star_history),
        traffic=build_traffic_series(snapshots),
        downloads=build_downloads_series(snapshots),
        daily_downloads=build_daily_downloads_series(release_rows) if release_rows else None,
        issues=build_issue_series(snapshots),
        packages=packages.series,
    )
    stats = build_stats_view(
        snapshots,
        traffic=traffic,
        packages=packages.latest,
        policy=format_policy(config),
    )

    dashboard = Dashboard(
        repo=repo,
        status=DashboardStatus.READY,
        stats=stats,
        has_traffic=traffic,
        series=series,
        releases=build_release_ranking(release_rows, config.display.top_releases),
        packages=packages,
    )
    logger.info(
        "Dashboard built",
        repo=repo,
        snapshots=len(snapshots),
        releases=len(dashboard.releases.details),
        packages=len(packages.series),
        traffic=traffic,
    )
    return dashboard


class DashboardService:
    """Fetches the datasets of a repository and builds its dashboard."""

    def __init__(self, config: GitPulseConfig | None = None, source: DatasetSource | None = None) -> None:
        self.config = config or GitPulseConfig()
        self._source = source

    def _create_source(self) -> DatasetSource:
        return create_source(self.config.source.location, self.config.source)

    async def fetch(self, repo: RepoRef | str) -> RawDatasets:
        """Retrieve the raw datasets for ``repo`` concurrently."""

        ref = repo if isinstance(repo, RepoRef) else RepoRef.parse(repo)
        if self._source is not None:
            return await fetch_datasets(self._source, ref)
        async with self._create_source() as source:
            return await fetch_datasets(source, ref)

    async def load(self, repo: RepoRef | str) -> Dashboard:
        """Fetch everything, then run the pipeline once.

        Raises:
            SourceError: the snapshot dataset exists but could not be retrieved
        """

        ref = repo if isinstance(repo, RepoRef) else RepoRef.parse(repo)
        with logger.contextualize(repo=ref.slug):
            datasets = await self.fetch(ref)
            failure = datasets.failures.get(DatasetKind.SNAPSHOTS)
            if failure is not None:
                raise failure
            return build_dashboard(datasets, self.config, repo=ref.slug)


__all__ = ["NO_DATA_MESSAGE", "DashboardService", "build_dashboard", "format_policy"]
