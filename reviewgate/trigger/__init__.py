"""Trigger engine: classify event, select diff range, filter paths, size budget, decide."""

from reviewgate.trigger.budget import DEFAULT_TURN_BUDGET, MAX_TURN_BUDGET, turn_budget
from reviewgate.trigger.classifier import (
    ClassifiedEvent,
    UnsupportedEventKind,
    classify_event,
    is_review_requested,
    parse_event,
)
from reviewgate.trigger.diff_range import MissingRevisionReference, select_diff_range
from reviewgate.trigger.engine import TriggerEngine
from reviewgate.trigger.path_filter import (
    GlobPattern,
    MalformedScopeRule,
    ScopeMatcher,
    collect_change_set,
)

__all__ = [
    "DEFAULT_TURN_BUDGET",
    "MAX_TURN_BUDGET",
    "ClassifiedEvent",
    "GlobPattern",
    "MalformedScopeRule",
    "MissingRevisionReference",
    "ScopeMatcher",
    "TriggerEngine",
    "UnsupportedEventKind",
    "classify_event",
    "collect_change_set",
    "is_review_requested",
    "parse_event",
    "select_diff_range",
    "turn_budget",
]
