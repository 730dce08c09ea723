"""Semver comparison utilities."""

from __future__ import annotations

from semver import Version

from helm_updater.models import UpdateType


def parse_version(v: str | None) -> Version | None:
    """Parse a version string, returning None on failure."""
    if not v:
        return None
    raw = str(v).strip()
    # Strip a leading 'v' or '='
    if raw[:1] in ("v", "V", "="):
        raw = raw[1:]
    try:
        return Version.parse(raw)
    except (ValueError, TypeError):
        return None


def is_prerelease(v: Version) -> bool:
    return v.prerelease is not None


def triplet(v: Version) -> tuple[int, int, int]:
    return (v.major, v.minor, v.patch)


def classify_version_change(current: Version, candidate: Version) -> UpdateType:
    if candidate.major != current.major:
        return UpdateType.MAJOR
    if candidate.minor != current.minor:
        return UpdateType.MINOR
    return UpdateType.PATCH


def classify_update(current: str, candidate: str) -> UpdateType | None:
    """Classify the change between two version strings.

    Returns None if either side is not a valid semantic version.
    """
    cur = parse_version(current)
    cand = parse_version(candidate)
    if cur is None or cand is None:
        return None
    return classify_version_change(cur, cand)

