"""Pick the target version for a chart reference under an update strategy."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from semver import Version

from helm_updater.core.ignore import IgnoreFilter
from helm_updater.models import UpdateStrategy
from helm_updater.models.chart import CandidateVersion, ChartReference
from helm_updater.models.update import ProposedUpdate
from helm_updater.utils.version_compare import (
    classify_version_change,
    is_prerelease,
    parse_version,
    triplet,
)

logger = logging.getLogger(__name__)


def allowed_by_strategy(current: Version, candidate: Version, strategy: UpdateStrategy) -> bool:
    """Strategy predicate; does not check that the candidate is newer."""
    if strategy is UpdateStrategy.PATCH:
        return candidate.major == current.major and candidate.minor == current.minor
    if strategy is UpdateStrategy.MINOR:
        return candidate.major == current.major
    return True


def is_upgrade(current: Version, candidate: Version) -> bool:
    if candidate > current:
        return True
    # A stable release of the pre-release being tracked is a promotion.
    return is_prerelease(current) and not is_prerelease(candidate) and triplet(candidate) == triplet(current)


def select_update(
    reference: ChartReference,
    candidates: Iterable[CandidateVersion],
    strategy: UpdateStrategy | str = UpdateStrategy.ALL,
    ignore_filter: IgnoreFilter | None = None,
) -> ProposedUpdate | None:
    """Return the best eligible newer version for ``reference``, if any.

    Candidates that are not valid semantic versions are dropped. A
    pre-release candidate only counts when no stable candidate with an equal
    or higher ``major.minor.patch`` is published.
    """
    strategy = UpdateStrategy.from_str(strategy)

    current = parse_version(reference.current_version)
    if current is None:
        logger.warning(
            "%s: current version %s is not a valid semver, skipping",
            reference.chart_name, reference.current_version,
        )
        return None

    parsed: list[tuple[Version, str]] = []
    for candidate in candidates:
        version = parse_version(candidate.version)
        if version is not None:
            parsed.append((version, candidate.version))

    stable_triplets = [triplet(v) for v, _ in parsed if not is_prerelease(v)]
    best: tuple[Version, str] | None = None

    for version, raw in parsed:
        if not is_upgrade(current, version):
            continue
        if not allowed_by_strategy(current, version, strategy):
            continue
        if is_prerelease(version) and any(t >= triplet(version) for t in stable_triplets):
            continue
        if ignore_filter is not None and ignore_filter.is_candidate_excluded(
            reference, raw, classify_version_change(current, version)
        ):
            continue
        if best is None or version > best[0]:
            best = (version, raw)

    if best is None:
        logger.warning(
            "%s: no eligible update from %s (strategy: %s, %d candidate(s))",
            reference.chart_name, reference.current_version, strategy.value, len(parsed),
        )
        return None

    return ProposedUpdate(
        reference=reference,
        current_version=reference.current_version,
        new_version=best[1],
    )
