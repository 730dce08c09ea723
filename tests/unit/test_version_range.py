"""Unit tests for ignore-rule version patterns."""

from __future__ import annotations

import pytest
import semantic_version

from helm_updater.utils.version_range import (
    ExactMatcher,
    RangeMatcher,
    WildcardMatcher,
    compile_pattern,
)


class TestCompilePattern:
    """Pattern shape decides the matcher."""

    def test_full_version_is_exact(self) -> None:
        matcher = compile_pattern("16.2.1")
        assert isinstance(matcher, ExactMatcher)
        assert matcher.matches("16.2.1")
        assert not matcher.matches("16.2.10")

    @pytest.mark.parametrize("pattern", ["16.x", "16.*", "16.X", "16.2.x", "*"])
    def test_wildcards(self, pattern: str) -> None:
        assert isinstance(compile_pattern(pattern), WildcardMatcher)

    @pytest.mark.parametrize("pattern", [">=16.0.0 <17.0.0", "^1.2.3", "~1.2", "1.0.0 - 2.0.0", "<1 || >=3"])
    def test_ranges(self, pattern: str) -> None:
        assert isinstance(compile_pattern(pattern), RangeMatcher)

    @pytest.mark.parametrize("pattern", ["", "   ", "latest", ">=foo", "!=1.2.3", "!=1.x", ">=1.0.0 <=lts"])
    def test_unparseable_gives_none(self, pattern: str) -> None:
        assert compile_pattern(pattern) is None


class TestWildcardMatcher:
    """Tests for prefix wildcards."""

    def test_major_wildcard(self) -> None:
        matcher = compile_pattern("16.x")
        assert matcher is not None
        assert matcher.matches("16.0.0")
        assert matcher.matches("16.5.3")
        assert not matcher.matches("17.0.0")
        assert not matcher.matches("160.0.0")

    def test_minor_wildcard(self) -> None:
        matcher = compile_pattern("16.2.*")
        assert matcher is not None
        assert matcher.matches("16.2.9")
        assert not matcher.matches("16.3.0")

    def test_star_matches_every_valid_version(self) -> None:
        matcher = compile_pattern("*")
        assert matcher is not None
        assert matcher.matches("0.0.1")
        assert not matcher.matches("not-a-version")


class TestRangeMatcher:
    """Tests for comparator ranges."""

    @pytest.mark.parametrize(
        ("pattern", "version", "expected"),
        [
            (">=16.0.0 <17.0.0", "16.5.0", True),
            (">=16.0.0 <17.0.0", "17.0.0", False),
            (">=16.0.0 <17.0.0", "15.9.9", False),
            (">= 16.0.0, < 17.0.0", "16.0.0", True),
            (">=16.0.0  <17.0.0", "16.9.9", True),
            (">16.2.0", "16.2.0", False),
            ("<=2.0.0", "2.0.0", True),
            ("^1.2.3", "1.9.0", True),
            ("^1.2.3", "2.0.0", False),
            ("^0.2.3", "0.2.9", True),
            ("^0.2.3", "0.3.0", False),
            ("^0.0.3", "0.0.4", False),
            ("~1.2.3", "1.2.9", True),
            ("~1.2.3", "1.3.0", False),
            ("~1", "1.9.0", True),
            ("~1", "2.0.0", False),
            ("1.0.0 - 2.0.0", "2.0.0", True),
            ("1.0.0 - 2.0.0", "2.0.1", False),
            ("1.0 - 2", "2.9.9", True),
            ("1.0 - 2", "3.0.0", False),
            ("<1.0.0 || >=3.0.0", "0.5.0", True),
            ("<1.0.0 || >=3.0.0", "3.1.0", True),
            ("<1.0.0 || >=3.0.0", "2.0.0", False),
            (">1.2", "1.2.9", False),
            (">1.2", "1.3.0", True),
            ("<=1.2", "1.2.9", True),
            ("<=1.2", "1.3.0", False),
            ("=16", "16.4.0", True),
        ],
    )
    def test_matches(self, pattern: str, version: str, expected: bool) -> None:
        matcher = compile_pattern(pattern)
        assert matcher is not None
        assert matcher.matches(version) is expected

    def test_prerelease_excluded_without_opt_in(self) -> None:
        """A range only covers pre-releases of a triplet it names with a pre-release."""
        matcher = compile_pattern(">=16.0.0 <17.0.0")
        assert matcher is not None
        assert not matcher.matches("16.5.0-rc.1")

    def test_prerelease_included_on_same_triplet(self) -> None:
        matcher = compile_pattern(">=16.0.0-rc.1 <17.0.0")
        assert matcher is not None
        assert matcher.matches("16.0.0-rc.2")
        assert not matcher.matches("16.1.0-rc.1")

    def test_invalid_version_never_matches(self) -> None:
        matcher = compile_pattern(">=1.0.0")
        assert matcher is not None
        assert not matcher.matches("latest")

    def test_build_metadata_ignored(self) -> None:
        matcher = compile_pattern("^16.0.0")
        assert matcher is not None
        assert matcher.matches("16.3.0+build.7")

    def test_range_matcher_holds_compiled_npm_spec(self) -> None:
        matcher = compile_pattern("^1.2.3 || ~2.0")
        assert isinstance(matcher, RangeMatcher)
        assert isinstance(matcher.spec, semantic_version.NpmSpec)
        assert matcher.matches("2.0.5")
        assert not matcher.matches("2.1.0")
