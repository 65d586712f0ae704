"""Data models for events, scope rules, change sets and decisions (Pydantic)."""

from reviewgate.models.change_set import ChangeSet, DiffRange
from reviewgate.models.decision import ReviewResult, TriggerDecision
from reviewgate.models.event import EventKind, RepositoryEvent
from reviewgate.models.scope import PathScopeRule

__all__ = [
    "ChangeSet",
    "DiffRange",
    "EventKind",
    "PathScopeRule",
    "RepositoryEvent",
    "ReviewResult",
    "TriggerDecision",
]
