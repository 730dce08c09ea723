"""Version pattern matchers used by ignore rules.

A pattern is compiled once into one of three matchers, chosen by its shape:

* ``ExactMatcher``: a full semantic version, compared by string equality.
* ``WildcardMatcher``: ``16.x``, ``16.*``, ``16.2.x`` or ``*``.
* ``RangeMatcher``: an npm range such as ``>=16.0.0 <17.0.0``, caret and
  tilde ranges, hyphen ranges and ``||`` alternatives, evaluated by
  ``semantic_version.NpmSpec``.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

import semantic_version

from helm_updater.utils.version_compare import parse_version, triplet

_WILDCARDS = frozenset({"x", "X", "*"})

# npm accepts ">= 1.2.3"; NpmSpec wants the operator glued to the version.
_OP_SPACE = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")


class VersionMatcher(ABC):
    pattern: str

    @abstractmethod
    def matches(self, version: str) -> bool:
        """Return True if ``version`` is covered by this pattern."""


@dataclass(frozen=True)
class ExactMatcher(VersionMatcher):
    pattern: str

    def matches(self, version: str) -> bool:
        return version.strip() == self.pattern


@dataclass(frozen=True)
class WildcardMatcher(VersionMatcher):
    pattern: str
    prefix: tuple[int, ...]

    def matches(self, version: str) -> bool:
        parsed = parse_version(version)
        if parsed is None:
            return False
        return triplet(parsed)[: len(self.prefix)] == self.prefix


@dataclass(frozen=True)
class RangeMatcher(VersionMatcher):
    pattern: str
    spec: semantic_version.NpmSpec

    def matches(self, version: str) -> bool:
        parsed = parse_version(version)
        if parsed is None:
            return False
        # Build metadata plays no part in range membership.
        return self.spec.match(semantic_version.Version(str(parsed.replace(build=None))))


def compile_pattern(pattern: str) -> VersionMatcher | None:
    """Compile a version pattern, returning None when it cannot be parsed."""
    text = (pattern or "").strip()
    if not text:
        return None
    if parse_version(text) is not None and text[:1].isdigit():
        return ExactMatcher(text)
    prefix = _wildcard_prefix(text)
    if prefix is not None:
        return WildcardMatcher(text, prefix)
    try:
        spec = semantic_version.NpmSpec(_normalize_range(text))
    except ValueError:
        return None
    return RangeMatcher(text, spec)


def _normalize_range(text: str) -> str:
    """Collapse whitespace and accept commas between comparators."""
    return " ".join(_OP_SPACE.sub(r"\1", text.replace(",", " ")).split())


def _wildcard_prefix(text: str) -> tuple[int, ...] | None:
    parts = text.split(".")
    if len(parts) > 3:
        return None
    prefix: list[int] = []
    seen_wildcard = False
    for part in parts:
        if part in _WILDCARDS:
            seen_wildcard = True
        elif part.isdigit() and not seen_wildcard:
            prefix.append(int(part))
        else:
            return None
    return tuple(prefix) if seen_wildcard else None
