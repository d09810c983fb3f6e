"""gitpulse - repository metrics dashboard pipeline.

Turns the CSV snapshots written by a metrics collector into the stats, time
series and release/package rankings a dashboard renders.
"""

import asyncio
from dataclasses import replace

from gitpulse.core.config import ConfigManager, GitPulseConfig
from gitpulse.core.data import RawDatasets, RepoRef
from gitpulse.core.logging import configure_logging
from gitpulse.core.models import Dashboard, DashboardStatus
from gitpulse.core.services import DashboardService, build_dashboard


async def load_dashboard_async(
    repo: str,
    source: str | None = None,
    config: GitPulseConfig | None = None,
) -> Dashboard:
    """Fetch and build the dashboard of ``repo`` (``owner/name``).

    Args:
        repo: Repository identifier
        source: URL or directory holding ``<owner>/<name>/*.csv``; defaults to
            the configured location
        config: Configuration, defaults to built-in settings

    Examples:
        >>> import asyncio
        >>> import gitpulse
        >>> dashboard = asyncio.run(gitpulse.load_dashboard_async("octo/demo", source="data"))
        >>> print(dashboard.status)
    """
    config = config or GitPulseConfig()
    if source is not None:
        config = replace(config, source=replace(config.source, location=source))
    return await DashboardService(config).load(repo)


def load_dashboard(
    repo: str,
    source: str | None = None,
    config: GitPulseConfig | None = None,
) -> Dashboard:
    """Synchronous wrapper around :func:`load_dashboard_async`."""
    return asyncio.run(load_dashboard_async(repo, source=source, config=config))


__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "Dashboard",
    "DashboardService",
    "DashboardStatus",
    "GitPulseConfig",
    "RawDatasets",
    "RepoRef",
    "build_dashboard",
    "configure_logging",
    "load_dashboard",
    "load_dashboard_async",
]
