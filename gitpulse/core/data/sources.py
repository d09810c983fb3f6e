"""Concurrent retrieval of the raw CSV datasets.

Datasets are addressed as ``<location>/<owner>/<name>/<file>``. A dataset that
cannot be retrieved is reported as missing (``None``) rather than failing the
whole load. Failures other than "not found" are kept in
:attr:`RawDatasets.failures` so callers can tell an outage from an empty feed.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import httpx
from loguru import logger

from gitpulse.core.config.settings import SourceConfig
from gitpulse.core.exceptions import (
    DataValidationError,
    GitPulseError,
    NetworkError,
    ResourceNotFoundError,
    SourceError,
)
from gitpulse.core.logging import log_duration

RETRY_ON_STATUS = frozenset({429, 500, 502, 503, 504})


class DatasetKind(str, Enum):
    """The four CSV files tracked per repository."""

    SNAPSHOTS = "snapshots"
    RELEASES = "releases"
    STAR_HISTORY = "star_history"
    PACKAGES = "packages"

    @property
    def filename(self) -> str:
        return _FILENAMES[self]


_FILENAMES = {
    DatasetKind.SNAPSHOTS: "aggregate.csv",
    DatasetKind.RELEASES: "releases.csv",
    DatasetKind.STAR_HISTORY: "star_history.csv",
    DatasetKind.PACKAGES: "packages.csv",
}


@dataclass(frozen=True, slots=True)
class RepoRef:
    """``owner/name`` repository identifier."""

    owner: str
    name: str

    @classmethod
    def parse(cls, value: str | None) -> "RepoRef":
        """Parse ``owner/name``, rejecting anything else."""

        parts = (value or "").strip().split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise DataValidationError(
                f"Repository must look like 'owner/name', got {value!r}",
                validation_errors={"repo": value},
            )
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.slug


@dataclass(frozen=True, slots=True)
class RawDatasets:
    """Raw CSV text per dataset; ``None`` marks a missing resource."""

    snapshots: str | None = None
    releases: str | None = None
    star_history: str | None = None
    packages: str | None = None
    # why a dataset is missing, when it was not simply absent
    failures: dict[DatasetKind, SourceError] = field(default_factory=dict)

    def get(self, kind: DatasetKind) -> str | None:
        return getattr(self, kind.value)

    @property
    def missing(self) -> tuple[DatasetKind, ...]:
        return tuple(kind for kind in DatasetKind if self.get(kind) is None)


class DatasetSource(ABC):
    """Retrieves the raw text of one dataset."""

    name: str = "source"

    @abstractmethod
    async def fetch_text(self, repo: RepoRef, kind: DatasetKind) -> str:
        """Return the dataset text or raise a :class:`SourceError`."""

    async def aclose(self) -> None:
        """Release any held resources."""

    async def __aenter__(self) -> "DatasetSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class LocalDatasetSource(DatasetSource):
    """Reads datasets from a directory tree."""

    name = "local"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, repo: RepoRef, kind: DatasetKind) -> Path:
        return self.root / repo.owner / repo.name / kind.filename

    async def fetch_text(self, repo: RepoRef, kind: DatasetKind) -> str:
        path = self.path_for(repo, kind)
        if not path.is_file():
            raise ResourceNotFoundError(f"{path} does not exist", self.name, str(path))
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SourceError(
                f"{path} is not valid UTF-8: {exc.reason}",
                self.name,
                details={"resource": str(path), "position": exc.start},
            ) from exc


class HttpDatasetSource(DatasetSource):
    """Fetches datasets over HTTP with retry on transient failures."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        config: SourceConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.config = config or SourceConfig(location=base_url)
        self._client = client
        self._owns_client = client is None

    def url_for(self, repo: RepoRef, kind: DatasetKind) -> str:
        return f"{self.base_url}/{repo.owner}/{repo.name}/{kind.filename}"

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_text(self, repo: RepoRef, kind: DatasetKind) -> str:
        url = self.url_for(repo, kind)
        client = self._ensure_client()
        attempts = self.config.max_retries + 1

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = await client.get(url)
            except httpx.TransportError as exc:
                if last_attempt:
                    raise NetworkError(f"Request to {url} failed: {exc}", self.name) from exc
                await self._backoff(url, attempt, reason=type(exc).__name__)
                continue

            if response.status_code == 404:
                raise ResourceNotFoundError(f"{url} not found", self.name, url)
            if response.status_code in RETRY_ON_STATUS and not last_attempt:
                await self._backoff(url, attempt, reason=f"HTTP {response.status_code}")
                continue
            if response.is_error:
                raise NetworkError(
                    f"Request to {url} failed with status {response.status_code}",
                    self.name,
                    status_code=response.status_code,
                )
            return response.text

        raise NetworkError(f"Request to {url} exhausted retries", self.name)  # pragma: no cover

    async def _backoff(self, url: str, attempt: int, *, reason: str) -> None:
        delay = self.config.backoff_factor * (2**attempt)
        logger.warning(
            "Retrying {} in {:.2f}s after {} (attempt {})",
            url,
            delay,
            reason,
            attempt + 1,
        )
        await asyncio.sleep(delay)


def create_source(location: str, config: SourceConfig | None = None) -> DatasetSource:
    """HTTP source for ``http(s)://`` locations, local directory otherwise."""

    if location.startswith(("http://", "https://")):
        return HttpDatasetSource(location, config)
    return LocalDatasetSource(location)


async def _fetch_one(source: DatasetSource, repo: RepoRef, kind: DatasetKind) -> str:
    with logger.contextualize(repo=repo.slug, dataset=kind.value):
        with log_duration("Fetched dataset", source=source.name):
            return await source.fetch_text(repo, kind)


async def fetch_datasets(source: DatasetSource, repo: RepoRef) -> RawDatasets:
    """Fetch all datasets concurrently; failures become missing datasets."""

    kinds = list(DatasetKind)
    results = await asyncio.gather(
        *(_fetch_one(source, repo, kind) for kind in kinds),
        return_exceptions=True,
    )

    texts: dict[str, str | None] = {}
    failures: dict[DatasetKind, SourceError] = {}
    for kind, result in zip(kinds, results, strict=True):
        if isinstance(result, ResourceNotFoundError):
            logger.info("Dataset {} not available for {}", kind.filename, repo.slug, dataset=kind.value)
            texts[kind.value] = None
        elif isinstance(result, (GitPulseError, OSError, httpx.HTTPError)):
            logger.warning(
                "Failed to load {} for {}: {}",
                kind.filename,
                repo.slug,
                result,
                dataset=kind.value,
                error_type=type(result).__name__,
            )
            texts[kind.value] = None
            failures[kind] = result if isinstance(result, SourceError) else SourceError(str(result), source.name)
        elif isinstance(result, BaseException):
            raise result
        else:
            texts[kind.value] = result
    return RawDatasets(**texts, failures=failures)


__all__ = [
    "DatasetKind",
    "DatasetSource",
    "HttpDatasetSource",
    "LocalDatasetSource",
    "RawDatasets",
    "RepoRef",
    "create_source",
    "fetch_datasets",
]
