"""Classify GitHub webhook events into review trigger kinds.

Handled events:
- pull_request: opened, synchronize, edited
- issue_comment: created (on pull requests only)
- pull_request_review_comment: created

Edited pull requests only trigger when the description has a checked
checklist item with the review request label, e.g. "- [x] Request AI review".
"""

import logging
import re
from typing import Any, Dict

from pydantic import BaseModel

from reviewgate.models import EventKind, RepositoryEvent

_KINDS: Dict[tuple[str, str], EventKind] = {
    ("pull_request", "opened"): EventKind.PR_OPENED,
    ("pull_request", "synchronize"): EventKind.PR_SYNCHRONIZE,
    ("pull_request", "edited"): EventKind.PR_EDITED,
    ("issue_comment", "created"): EventKind.ISSUE_COMMENT,
    ("pull_request_review_comment", "created"): EventKind.REVIEW_COMMENT,
}


class UnsupportedEventKind(Exception):
    """Raised when an event name/action is not a review trigger."""

    def __init__(self, event_name: str, action: str | None = None) -> None:
        self.event_name = event_name
        self.action = action
        label = f"{event_name}.{action}" if action else event_name
        super().__init__(f"unsupported event: {label}")


class ClassifiedEvent(BaseModel):
    """Event plus the flags the engine branches on."""

    event: RepositoryEvent
    is_comment_triggered: bool
    review_requested: bool = False

    @property
    def kind(self) -> EventKind:
        return self.event.kind


def is_review_requested(text: str | None, label: str) -> bool:
    """Return True if text has a checked checkbox immediately followed by label.

    Case-insensitive; the checkbox may be [x] or [X], with optional spaces
    before the label.
    """
    if not text or not label.strip():
        return False
    pattern = r"\[[xX]\][ \t]*" + re.escape(label.strip())
    return re.search(pattern, text, re.IGNORECASE) is not None


def _sha(obj: Dict[str, Any] | None) -> str | None:
    if not obj:
        return None
    value = obj.get("sha")
    return str(value) if value else None


def parse_event(event_name: str, payload: Dict[str, Any]) -> RepositoryEvent:
    """Build RepositoryEvent from a GitHub event name and its JSON payload.

    Raises UnsupportedEventKind when the event/action pair is not a trigger.
    """
    action = payload.get("action")
    kind = _KINDS.get((event_name, action or ""))
    if kind is None:
        raise UnsupportedEventKind(event_name, action)

    repo_payload = payload.get("repository") or {}
    sender = (payload.get("sender") or {}).get("login")
    pull = payload.get("pull_request") or {}

    if kind == EventKind.ISSUE_COMMENT:
        issue = payload.get("issue") or {}
        # issue_comment also fires for plain issues; only PR conversations count
        if not issue.get("pull_request"):
            raise UnsupportedEventKind(event_name, f"{action} (not a pull request)")
        comment = payload.get("comment") or {}
        number = issue.get("number")
        return RepositoryEvent(
            kind=kind,
            repository=repo_payload.get("full_name"),
            pr_number=int(number) if number is not None else None,
            comment_text=comment.get("body") or "",
            sender=sender,
        )

    number = pull.get("number")
    previous_head = payload.get("before") if kind == EventKind.PR_SYNCHRONIZE else None
    comment_text = None
    if kind == EventKind.REVIEW_COMMENT:
        comment_text = (payload.get("comment") or {}).get("body") or ""
    return RepositoryEvent(
        kind=kind,
        base_revision=_sha(pull.get("base")),
        head_revision=_sha(pull.get("head")),
        previous_head_revision=previous_head or None,
        pr_description_text=pull.get("body") if kind == EventKind.PR_EDITED else None,
        repository=repo_payload.get("full_name"),
        pr_number=int(number) if number is not None else None,
        comment_text=comment_text,
        sender=sender,
    )


def classify_event(
    event: RepositoryEvent,
    review_request_label: str,
    log: logging.Logger | None = None,
) -> ClassifiedEvent:
    """Flag comment-triggered events and check the checklist on edited PRs.

    Comment bodies are not inspected here; narrowing to the discussed code
    is left to the review agent.
    """
    logger = log or logging.getLogger("reviewgate.trigger.classifier")
    if event.kind.is_comment:
        return ClassifiedEvent(event=event, is_comment_triggered=True)
    requested = False
    if event.kind == EventKind.PR_EDITED:
        requested = is_review_requested(event.pr_description_text, review_request_label)
        logger.debug("PR #%s edited: review requested=%s", event.pr_number, requested)
    return ClassifiedEvent(event=event, is_comment_triggered=False, review_requested=requested)
