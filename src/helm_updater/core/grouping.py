"""Partition proposed updates into named groups."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

from helm_updater.models.config import GroupDefinition
from helm_updater.models.update import ProposedUpdate

UNGROUPED = "ungrouped"


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def matches_glob(name: str, pattern: str) -> bool:
    """Case-insensitive glob match supporting only ``*`` and ``?``."""
    return _glob_regex(pattern).match(name) is not None


def matches_group(update: ProposedUpdate, definition: GroupDefinition) -> bool:
    if not any(matches_glob(update.chart_name, p) for p in definition.name_patterns):
        return False
    if definition.update_classes:
        return update.update_type in definition.update_classes
    return True


def group_updates(
    updates: Iterable[ProposedUpdate],
    definitions: Iterable[GroupDefinition],
) -> dict[str, list[ProposedUpdate]]:
    """Assign each update to the first matching group, or to ``ungrouped``.

    Groups that receive no update are left out of the result.
    """
    definitions = list(definitions)
    buckets: dict[str, list[ProposedUpdate]] = {d.name: [] for d in definitions}
    buckets[UNGROUPED] = []

    for update in updates:
        target = next((d.name for d in definitions if matches_group(update, d)), UNGROUPED)
        buckets[target].append(update)

    return {name: members for name, members in buckets.items() if members}
