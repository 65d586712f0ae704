"""Trigger decision and review agent result."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reviewgate.models.change_set import ChangeSet
from reviewgate.models.event import EventKind


class TriggerDecision(BaseModel):
    """Final output of the trigger engine for one event.

    should_run=False means the review agent is never invoked.
    """

    model_config = ConfigDict(frozen=True)

    should_run: bool
    scope: ChangeSet | None = None
    turn_budget: int | None = Field(default=None, ge=10, le=50, multiple_of=10)
    kind: EventKind | None = None
    reason: str = ""
    error: str | None = None

    @model_validator(mode="after")
    def check_budget_when_running(self) -> "TriggerDecision":
        if self.should_run and self.turn_budget is None:
            raise ValueError("turn_budget is required when should_run is true")
        if self.should_run and self.error:
            raise ValueError("a failed decision cannot run")
        return self

    @property
    def file_count(self) -> int:
        return self.scope.file_count if self.scope is not None else 0

    @property
    def failed(self) -> bool:
        """True when the decision failed closed on an error."""
        return self.error is not None


class ReviewResult(BaseModel):
    """Outcome of one review agent invocation."""

    success: bool
    exit_code: int | None = None
    output: str = ""
    turn_budget: int
