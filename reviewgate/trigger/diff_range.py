"""Choose which two revisions to diff for a pull request event."""

import logging
from typing import Callable

from reviewgate.models import DiffRange, EventKind, RepositoryEvent

NULL_SHA = "0" * 40


class MissingRevisionReference(Exception):
    """Raised when an expected revision id is absent from the event."""

    pass


def _full_range(event: RepositoryEvent) -> DiffRange:
    if not event.base_revision or not event.head_revision:
        missing = "base" if not event.base_revision else "head"
        raise MissingRevisionReference(f"{event.kind.value}: {missing} revision missing")
    return DiffRange(from_revision=event.base_revision, to_revision=event.head_revision)


def _previous_head(event: RepositoryEvent, revision_exists: Callable[[str], bool] | None) -> str:
    previous = (event.previous_head_revision or "").strip()
    if not previous or previous == NULL_SHA:
        raise MissingRevisionReference("previous head revision missing")
    if revision_exists is not None and not revision_exists(previous):
        raise MissingRevisionReference(f"previous head revision {previous} not found")
    return previous


def select_diff_range(
    event: RepositoryEvent,
    revision_exists: Callable[[str], bool] | None = None,
    log: logging.Logger | None = None,
) -> DiffRange | None:
    """Return the diff range for event, or None for comment events.

    Synchronize uses previous head..head when the previous head is known,
    otherwise it falls back to the full base..head range (e.g. after a
    force-push). Raises MissingRevisionReference if base or head is missing.
    """
    logger = log or logging.getLogger("reviewgate.trigger.diff_range")
    if event.kind.is_comment:
        return None

    full = _full_range(event)
    if event.kind != EventKind.PR_SYNCHRONIZE:
        return full

    try:
        previous = _previous_head(event, revision_exists)
    except MissingRevisionReference as e:
        logger.info("PR #%s: %s, using full range", event.pr_number, e)
        return full
    return DiffRange(from_revision=previous, to_revision=full.to_revision, incremental=True)
