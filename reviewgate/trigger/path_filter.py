"""Filter changed paths by include/exclude globs.

Glob syntax (case-sensitive, rooted at the repository root):
- ``*`` matches any run of characters except ``/``
- ``?`` matches one character except ``/``
- ``**`` matches across directories (``dir/**``, ``**/name``, ``a/**/b``)
- ``[abc]``, ``[a-z]``, ``[!abc]`` character classes
"""

import logging
import re
from typing import Iterable, List

from reviewgate.models import ChangeSet, DiffRange, PathScopeRule
from reviewgate.sources.base import ChangeSource


class MalformedScopeRule(ValueError):
    """Raised when a scope glob cannot be compiled."""

    pass


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a [...] class starting at pattern[start] == '['."""
    i = start + 1
    negate = i < len(pattern) and pattern[i] == "!"
    if negate:
        i += 1
    body_start = i
    # "]" right after the opening bracket is a literal member
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern) and pattern[i] != "]":
        i += 1
    if i >= len(pattern):
        raise MalformedScopeRule(f"unterminated character class in {pattern!r}")
    body = pattern[body_start:i].replace("\\", "\\\\")
    if body.startswith("^"):
        body = "\\" + body
    return ("[^" if negate else "[") + body + "]", i + 1


def glob_to_regex(pattern: str) -> str:
    """Translate a scope glob into an anchored regular expression source."""
    if not pattern or not pattern.strip():
        raise MalformedScopeRule("empty glob pattern")
    if pattern.startswith("/"):
        raise MalformedScopeRule(f"glob must be relative to the repository root: {pattern!r}")
    parts: List[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                at_segment_start = i == 0 or pattern[i - 1] == "/"
                if at_segment_start and pattern.startswith("**/", i):
                    parts.append("(?:.*/)?")
                    i += 3
                else:
                    parts.append(".*")
                    i += 2
                while i < n and pattern[i] == "*":
                    i += 1
            else:
                parts.append("[^/]*")
                i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            translated, i = _translate_class(pattern, i)
            parts.append(translated)
        else:
            parts.append(re.escape(c))
            i += 1
    return "".join(parts)


class GlobPattern:
    """One compiled scope glob."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        source = glob_to_regex(pattern)
        try:
            self._regex = re.compile(source)
        except re.error as e:
            raise MalformedScopeRule(f"invalid glob {pattern!r}: {e}") from e

    def matches(self, path: str) -> bool:
        return self._regex.fullmatch(path) is not None

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"


class ScopeMatcher:
    """Compiled PathScopeRule.

    Compiles every glob up front so a bad rule fails at startup rather
    than per event.
    """

    def __init__(self, rule: PathScopeRule) -> None:
        self.rule = rule
        self._include = [GlobPattern(p) for p in rule.include_globs]
        self._exclude = [GlobPattern(p) for p in rule.exclude_globs]

    def matches(self, path: str) -> bool:
        """In scope: matches at least one include and no exclude."""
        if not any(g.matches(path) for g in self._include):
            return False
        return not any(g.matches(path) for g in self._exclude)

    def filter_paths(self, paths: Iterable[str]) -> List[str]:
        """Keep in-scope paths in the given order, each once."""
        seen: set[str] = set()
        result: List[str] = []
        for path in paths:
            if path in seen:
                continue
            seen.add(path)
            if self.matches(path):
                result.append(path)
        return result


def collect_change_set(
    source: ChangeSource,
    diff_range: DiffRange,
    matcher: ScopeMatcher,
    log: logging.Logger | None = None,
) -> ChangeSet:
    """Enumerate paths changed in diff_range and keep the in-scope ones.

    An empty range (from == to) yields an empty change set without asking
    the source. DiffEnumerationFailure from the source propagates.
    """
    logger = log or logging.getLogger("reviewgate.trigger.path_filter")
    if diff_range.is_empty:
        logger.debug("Empty diff range at %s", diff_range.to_revision)
        return ChangeSet(diff_range=diff_range)
    changed = source.list_changed_paths(diff_range)
    matched = matcher.filter_paths(changed)
    logger.debug(
        "Diff %s..%s: %s changed, %s in scope",
        diff_range.from_revision,
        diff_range.to_revision,
        len(changed),
        len(matched),
    )
    return ChangeSet(matched_paths=tuple(matched), diff_range=diff_range, changed_count=len(changed))
