"""Repository event (one inbound webhook event, one decision)."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class EventKind(str, Enum):
    """Event kinds that can trigger a review."""

    PR_OPENED = "PR_OPENED"
    PR_SYNCHRONIZE = "PR_SYNCHRONIZE"
    PR_EDITED = "PR_EDITED"
    ISSUE_COMMENT = "ISSUE_COMMENT"
    REVIEW_COMMENT = "REVIEW_COMMENT"

    @property
    def is_comment(self) -> bool:
        return self in (EventKind.ISSUE_COMMENT, EventKind.REVIEW_COMMENT)


class RepositoryEvent(BaseModel):
    """Event built from host-supplied fields.

    Revisions are present for pull request kinds. previous_head_revision
    is only set on synchronize, and may be missing after a force-push.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    base_revision: str | None = None
    head_revision: str | None = None
    previous_head_revision: str | None = None
    pr_description_text: str | None = None
    repository: str | None = None
    pr_number: int | None = None
    comment_text: str | None = None
    sender: str | None = None
