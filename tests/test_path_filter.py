"""Tests for glob matching, scope filtering and change set collection."""

from typing import List
from unittest.mock import Mock

import pytest

from reviewgate.models import DiffRange, PathScopeRule
from reviewgate.sources.base import ChangeSource
from reviewgate.trigger.path_filter import (
    GlobPattern,
    MalformedScopeRule,
    ScopeMatcher,
    collect_change_set,
)

RULE = PathScopeRule(
    include_globs=("apps/backend-e2e/playwright/**",),
    exclude_globs=("**/*.md",),
)


class TestGlobPattern:
    """GlobPattern: ** crosses directories, * and ? do not."""

    def test_recursive_suffix(self) -> None:
        g = GlobPattern("apps/e2e/**")
        assert g.matches("apps/e2e/a.ts")
        assert g.matches("apps/e2e/tests/deep/b.ts")
        assert not g.matches("apps/other/a.ts")

    def test_recursive_prefix_matches_root(self) -> None:
        g = GlobPattern("**/README.md")
        assert g.matches("README.md")
        assert g.matches("a/b/README.md")
        assert not g.matches("a/b/README.mdx")

    def test_recursive_middle(self) -> None:
        g = GlobPattern("a/**/z.ts")
        assert g.matches("a/z.ts")
        assert g.matches("a/b/c/z.ts")
        assert not g.matches("b/z.ts")

    def test_star_stays_in_segment(self) -> None:
        g = GlobPattern("tests/*.spec.ts")
        assert g.matches("tests/a.spec.ts")
        assert not g.matches("tests/sub/a.spec.ts")

    def test_question_mark(self) -> None:
        g = GlobPattern("v?.txt")
        assert g.matches("v1.txt")
        assert not g.matches("v10.txt")
        assert not g.matches("v/.txt")

    def test_character_classes(self) -> None:
        assert GlobPattern("[ab].ts").matches("a.ts")
        assert not GlobPattern("[ab].ts").matches("c.ts")
        assert GlobPattern("[!ab].ts").matches("c.ts")
        assert not GlobPattern("[!ab].ts").matches("a.ts")

    def test_case_sensitive(self) -> None:
        assert not GlobPattern("**/*.md").matches("docs/README.MD")

    def test_dots_and_dashes_are_literal(self) -> None:
        g = GlobPattern("apps/backend-e2e/x.ts")
        assert g.matches("apps/backend-e2e/x.ts")
        assert not g.matches("apps/backend-e2e/xxts")

    @pytest.mark.parametrize("pattern", ["", "   ", "/abs/**", "tests/[ab.ts", "[z-a].ts"])
    def test_malformed(self, pattern: str) -> None:
        with pytest.raises(MalformedScopeRule):
            GlobPattern(pattern)

    def test_malformed_is_value_error(self) -> None:
        assert issubclass(MalformedScopeRule, ValueError)


class TestScopeMatcher:
    """ScopeMatcher: include first, exclude removes."""

    def test_in_scope(self) -> None:
        assert ScopeMatcher(RULE).matches("apps/backend-e2e/playwright/tests/a.spec.ts")

    def test_outside_include(self) -> None:
        assert not ScopeMatcher(RULE).matches("apps/backend/src/main.ts")

    def test_exclude_dominates(self) -> None:
        """A path matching both include and exclude is out of scope."""
        assert not ScopeMatcher(RULE).matches("apps/backend-e2e/playwright/README.md")

    def test_exclude_only_removes(self) -> None:
        """Exclude globs never add paths outside the include set."""
        rule = PathScopeRule(include_globs=("src/**",), exclude_globs=("docs/**",))
        assert not ScopeMatcher(rule).matches("docs/a.ts")

    def test_no_includes_matches_nothing(self) -> None:
        assert not ScopeMatcher(PathScopeRule()).matches("anything.ts")

    def test_filter_keeps_order_and_dedupes(self) -> None:
        paths = [
            "apps/backend-e2e/playwright/tests/b.spec.ts",
            "README.md",
            "apps/backend-e2e/playwright/tests/a.spec.ts",
            "apps/backend-e2e/playwright/tests/b.spec.ts",
            "apps/backend-e2e/playwright/README.md",
        ]
        assert ScopeMatcher(RULE).filter_paths(paths) == [
            "apps/backend-e2e/playwright/tests/b.spec.ts",
            "apps/backend-e2e/playwright/tests/a.spec.ts",
        ]

    def test_bad_rule_fails_on_construction(self) -> None:
        with pytest.raises(MalformedScopeRule):
            ScopeMatcher(PathScopeRule(include_globs=("ok/**",), exclude_globs=("[oops",)))


class _ListSource(ChangeSource):
    def __init__(self, paths: List[str]) -> None:
        self.paths = paths
        self.calls = 0

    def list_changed_paths(self, diff_range: DiffRange) -> List[str]:
        self.calls += 1
        return list(self.paths)


class TestCollectChangeSet:
    """collect_change_set: enumerate, filter, count."""

    def test_counts_in_scope_files(self) -> None:
        source = _ListSource(
            [
                "apps/backend-e2e/playwright/tests/a.spec.ts",
                "apps/backend-e2e/playwright/tests/b.spec.ts",
                "package.json",
            ]
        )
        rng = DiffRange(from_revision="a", to_revision="b")
        change_set = collect_change_set(source, rng, ScopeMatcher(RULE))
        assert change_set.file_count == 2
        assert change_set.changed_count == 3
        assert change_set.diff_range == rng

    def test_same_revision_is_empty_without_source_call(self) -> None:
        source = Mock(spec=ChangeSource)
        change_set = collect_change_set(source, DiffRange(from_revision="a", to_revision="a"), ScopeMatcher(RULE))
        assert change_set.matched_paths == ()
        assert change_set.file_count == 0
        source.list_changed_paths.assert_not_called()

    def test_idempotent(self) -> None:
        """Same range and rule give the same paths."""
        source = _ListSource(["apps/backend-e2e/playwright/x.ts", "apps/backend-e2e/playwright/y.ts"])
        rng = DiffRange(from_revision="a", to_revision="b")
        matcher = ScopeMatcher(RULE)
        first = collect_change_set(source, rng, matcher)
        second = collect_change_set(source, rng, matcher)
        assert first.matched_paths == second.matched_paths
        assert source.calls == 2
