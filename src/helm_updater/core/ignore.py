"""Exclude charts, versions or classes of change from update checks."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from helm_updater.models import UpdateType
from helm_updater.models.chart import ChartReference
from helm_updater.models.config import IgnoreRule
from helm_updater.utils.version_range import VersionMatcher, compile_pattern

logger = logging.getLogger(__name__)


@dataclass
class _CompiledRules:
    excluded: bool = False
    matchers: list[VersionMatcher] = field(default_factory=list)
    update_classes: set[UpdateType] = field(default_factory=set)


class IgnoreFilter:
    """Union of every ignore rule, indexed by chart name.

    Patterns are compiled once here; an unparseable pattern is reported and
    then never matches.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = ()):
        self._rules: dict[str, _CompiledRules] = defaultdict(_CompiledRules)
        self._reported: set[ChartReference] = set()
        for rule in rules:
            compiled = self._rules[rule.target_name]
            if rule.ignores_everything:
                compiled.excluded = True
                continue
            compiled.update_classes.update(rule.update_classes)
            for pattern in rule.version_patterns:
                matcher = compile_pattern(pattern)
                if matcher is None:
                    logger.warning(
                        "Ignoring unparseable version pattern %r in ignore rule for %s",
                        pattern, rule.target_name,
                    )
                    continue
                compiled.matchers.append(matcher)

    def is_excluded(self, reference: ChartReference) -> bool:
        compiled = self._rules.get(reference.chart_name)
        if compiled is not None and compiled.excluded:
            # Reported once per reference for the life of the filter
            if reference not in self._reported:
                self._reported.add(reference)
                logger.info("Skipping %s: excluded by ignore rule", reference)
            return True
        return False

    def is_candidate_excluded(
        self,
        reference: ChartReference,
        candidate_version: str,
        update_type: UpdateType | None,
    ) -> bool:
        compiled = self._rules.get(reference.chart_name)
        if compiled is None:
            return False
        if update_type is not None and update_type in compiled.update_classes:
            logger.debug("%s: ignoring %s (%s update)", reference.chart_name, candidate_version, update_type.value)
            return True
        for matcher in compiled.matchers:
            if matcher.matches(candidate_version):
                logger.debug("%s: ignoring %s (matches %r)", reference.chart_name, candidate_version, matcher.pattern)
                return True
        return False
