"""Per-run memo of fetched version data, keyed by source."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, TypeVar

from helm_updater.models import SourceKind
from helm_updater.models.source import SourceKey

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionCache:
    """Fetch-or-join cache.

    The first caller for a key runs the fetcher; concurrent callers for the
    same key wait on its future instead of issuing a second request. Entries
    never expire; a new instance starts empty.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[SourceKey, Future[Any]] = {}

    def get_or_fetch(self, key: SourceKey, fetcher: Callable[[], T]) -> T:
        with self._lock:
            future = self._entries.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._entries[key] = future

        if not owner:
            logger.debug("Cache hit for %s", key)
            return future.result()

        logger.debug("Cache miss for %s", key)
        try:
            value = fetcher()
        except BaseException as exc:
            with self._lock:
                self._entries.pop(key, None)
            future.set_exception(exc)
            raise
        future.set_result(value)
        return value

    def invalidate(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in SourceKind}
        with self._lock:
            for key in self._entries:
                counts[key.kind.value] += 1
        return counts

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
