"""Fetch published chart versions from Helm repositories and OCI registries."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

import httpx
import yaml

from helm_updater.config.settings import settings
from helm_updater.core.auth import AuthResolver
from helm_updater.core.cache import VersionCache
from helm_updater.models import SourceKind
from helm_updater.models.chart import CandidateVersion
from helm_updater.models.source import INDEX_FILE, SourceKey

logger = logging.getLogger(__name__)

# Prefer the C-accelerated YAML loader when available (~10x faster).
_YamlLoader = getattr(yaml, "CSafeLoader", yaml.SafeLoader)

ChartIndex = dict[str, list[CandidateVersion]]

T = TypeVar("T")


class VersionSourceError(Exception):
    """Base exception for version source failures."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code


class SourceAuthError(VersionSourceError):
    """Raised on 401/403 responses."""


class SourceNotFoundError(VersionSourceError):
    """Raised on 404 responses."""


class SourceUnavailableError(VersionSourceError):
    """Raised on 5xx responses and transport failures."""


class MalformedResponseError(VersionSourceError):
    """Raised when a response body does not have the expected structure."""


def _strip_scheme(location: str) -> str:
    for scheme in ("oci://", "https://", "http://"):
        if location.lower().startswith(scheme):
            return location[len(scheme):]
    return location


def source_key(location: str, chart_name: str) -> SourceKey:
    """Normalize a source location and chart name into a ``SourceKey``."""
    location = location.strip()
    kind = SourceKind.from_location(location)
    if kind is SourceKind.OCI:
        registry = _strip_scheme(location).rstrip("/")
        return SourceKey(kind, registry, chart_name.strip("/"))

    base = location.rstrip("/")
    if not base.endswith(f"/{INDEX_FILE}"):
        base = f"{base}/{INDEX_FILE}"
    return SourceKey(kind, base, chart_name)


def parse_index(text: str, url: str) -> ChartIndex:
    """Parse a classic repository ``index.yaml`` into per-chart candidates.

    Any structural problem rejects the whole document.
    """
    try:
        data = yaml.load(text, Loader=_YamlLoader)
    except (yaml.YAMLError, ValueError) as e:
        # Impossible timestamps such as 2024-02-30 fail as ValueError
        raise MalformedResponseError(f"Invalid YAML in repository index: {e}", url) from e

    if not isinstance(data, dict) or not isinstance(data.get("entries"), dict):
        raise MalformedResponseError("Repository index has no 'entries' mapping", url)

    index: ChartIndex = {}
    for chart_name, chart_entries in data["entries"].items():
        if chart_entries is None:
            index[str(chart_name)] = []
            continue
        if not isinstance(chart_entries, list):
            raise MalformedResponseError(f"Entries for chart {chart_name!r} are not a list", url)
        candidates: list[CandidateVersion] = []
        for entry in chart_entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("version"), (str, int, float)):
                raise MalformedResponseError(f"Release entry for chart {chart_name!r} has no version", url)
            candidates.append(CandidateVersion.from_index_entry(entry))
        index[str(chart_name)] = candidates
    return index


def parse_tags(body: Any, url: str) -> list[CandidateVersion]:
    """Turn an OCI ``tags/list`` response into candidates."""
    if not isinstance(body, dict):
        raise MalformedResponseError("Tag listing is not a JSON object", url)
    tags = body.get("tags")
    if not isinstance(tags, list):
        return []
    return [CandidateVersion(version=tag) for tag in tags if isinstance(tag, str)]


class VersionSourceClient:
    """HTTP client for chart version sources.

    Classic indexes are fetched once per repository URL and shared by every
    chart hosted there; OCI tag listings are fetched once per chart path.
    Both go through the supplied ``VersionCache``.
    """

    def __init__(
        self,
        auth: AuthResolver | None = None,
        cache: VersionCache | None = None,
        timeout: float | None = None,
    ) -> None:
        self.auth = auth or AuthResolver()
        self.cache = cache if cache is not None else VersionCache()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client: httpx.Client | None = None

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            auth=self.auth,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def __enter__(self) -> VersionSourceClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # -- public API --------------------------------------------------------

    def fetch_versions(self, source_location: str, chart_name: str) -> list[CandidateVersion]:
        """Return every published version of a chart, or [] on any failure."""
        return self.fetch_for_key(source_key(source_location, chart_name))

    def fetch_for_key(self, key: SourceKey) -> list[CandidateVersion]:
        # Failures are cached as empty results so a broken source is hit once per run.
        if key.kind is SourceKind.CLASSIC:
            index = self.cache.get_or_fetch(
                key.index_key(), lambda: self._guarded(key, self._fetch_index, {})
            )
            return list(index.get(key.chart_name, []))
        return list(self.cache.get_or_fetch(key, lambda: self._guarded(key, self._fetch_tags, [])))

    def _guarded(self, key: SourceKey, fetch: Callable[[str], T], default: T) -> T:
        try:
            return fetch(key.endpoint)
        except SourceAuthError as e:
            logger.error(
                "Authentication failed for %s (HTTP %s): %s. "
                "Check the registry-credentials entry for %s.",
                e.url, e.status_code, e.message, key.host,
            )
        except SourceNotFoundError as e:
            logger.error("Chart source not found at %s: %s", e.url, e.message)
        except SourceUnavailableError as e:
            logger.error("Chart source %s is unavailable: %s", e.url, e.message)
        except VersionSourceError as e:
            logger.error("Failed to fetch versions from %s: %s", e.url, e.message)
        return default

    # -- fetchers ----------------------------------------------------------

    def _fetch_index(self, url: str) -> ChartIndex:
        logger.info("Fetching Helm repository index %s", url)
        response = self._get(url)
        return parse_index(response.text, url)

    def _fetch_tags(self, url: str) -> list[CandidateVersion]:
        logger.info("Fetching OCI tags %s", url)
        response = self._get(url)
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError(f"Tag listing is not valid JSON: {e}", url) from e
        return parse_tags(body, url)

    def _get(self, url: str) -> httpx.Response:
        try:
            response = self.client.get(url)
        except httpx.TimeoutException as e:
            raise SourceUnavailableError(f"request timed out ({e})", url) from e
        except httpx.TransportError as e:
            # DNS failures, refused connections and TLS errors all land here
            raise SourceUnavailableError(f"{type(e).__name__}: {e}", url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SourceUnavailableError(f"{type(e).__name__}: {e}", url) from e
        return self._handle_response(response, url)

    def _handle_response(self, response: httpx.Response, url: str) -> httpx.Response:
        status = response.status_code
        if status in (401, 403):
            reason = "unauthorized" if status == 401 else "access forbidden"
            raise SourceAuthError(reason, url, status_code=status)
        if status == 404:
            raise SourceNotFoundError("not found", url, status_code=status)
        if status >= 500:
            raise SourceUnavailableError(f"server error (HTTP {status})", url, status_code=status)
        if status >= 400:
            raise VersionSourceError(f"request failed (HTTP {status})", url, status_code=status)
        return response
