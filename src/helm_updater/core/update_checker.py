"""Compare referenced chart versions against the versions their sources publish."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from helm_updater.config.settings import settings
from helm_updater.core.auth import AuthResolver
from helm_updater.core.cache import VersionCache
from helm_updater.core.grouping import group_updates
from helm_updater.core.ignore import IgnoreFilter
from helm_updater.core.strategy import select_update
from helm_updater.core.version_source import VersionSourceClient, source_key
from helm_updater.models.chart import CandidateVersion, ChartReference
from helm_updater.models.config import UpdaterConfig
from helm_updater.models.source import SourceKey
from helm_updater.models.update import ProposedUpdate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class UpdateChecker:
    """One run of version resolution and update planning.

    Owns the version cache; a fresh instance starts with nothing cached.
    """

    def __init__(
        self,
        config: UpdaterConfig | None = None,
        client: VersionSourceClient | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.config = config or UpdaterConfig()
        self.cache = VersionCache()
        self._owns_client = client is None
        if client is None:
            client = VersionSourceClient(auth=AuthResolver(self.config.registry_credentials), cache=self.cache)
        else:
            client.cache = self.cache
        self.client = client
        self.ignore_filter = IgnoreFilter(self.config.ignore)
        self.max_workers = max_workers or settings.max_workers

    def __enter__(self) -> UpdateChecker:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def resolve_versions(
        self, references: list[ChartReference]
    ) -> dict[SourceKey, list[CandidateVersion]]:
        """Fetch the published versions for every non-ignored reference.

        Each unique source is fetched once; sources yielding no versions are
        left out of the result.
        """
        return self._fetch_all([ref for ref in references if not self.ignore_filter.is_excluded(ref)])

    def _fetch_all(self, references: list[ChartReference]) -> dict[SourceKey, list[CandidateVersion]]:
        keys = list(dict.fromkeys(source_key(ref.source_location, ref.chart_name) for ref in references))
        if not keys:
            return {}

        logger.debug("Resolving %d unique source(s) for %d reference(s)", len(keys), len(references))
        workers = min(self.max_workers, len(keys))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="helm-updater") as pool:
            results = list(pool.map(self.client.fetch_for_key, keys))

        return {key: versions for key, versions in zip(keys, results) if versions}

    def check_updates(
        self,
        references: list[ChartReference],
        on_progress: ProgressCallback | None = None,
    ) -> list[ProposedUpdate]:
        """Propose at most one update per reference, in input order."""
        active = [ref for ref in references if not self.ignore_filter.is_excluded(ref)]
        available = self._fetch_all(active)
        updates: list[ProposedUpdate] = []
        total = len(active)

        for i, ref in enumerate(active, 1):
            if on_progress:
                on_progress(i, total, ref.chart_name)

            candidates = available.get(source_key(ref.source_location, ref.chart_name), [])
            update = select_update(
                ref, candidates, self.config.update_strategy, ignore_filter=self.ignore_filter
            )
            if update is not None:
                logger.info(
                    "Update available: %s %s -> %s",
                    ref.chart_name, update.current_version, update.new_version,
                )
                updates.append(update)

        return updates

    def group_updates(self, updates: list[ProposedUpdate]) -> dict[str, list[ProposedUpdate]]:
        return group_updates(updates, self.config.groups)

    def clear_cache(self) -> None:
        self.cache.invalidate()

    def cache_stats(self) -> dict[str, int]:
        return self.cache.stats()
