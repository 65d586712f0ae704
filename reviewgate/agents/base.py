"""Abstract base for the external review agent."""

import logging
from abc import ABC, abstractmethod

from reviewgate.models import ChangeSet, ReviewResult, TriggerDecision


class ReviewAgent(ABC):
    """External agent that reviews a pull request.

    The trigger engine only supplies the scope and the turn cap; the agent
    owns its timeouts and everything it posts.
    """

    @abstractmethod
    def invoke(self, scope: ChangeSet | None, turn_budget: int) -> ReviewResult:
        """Run one review limited to turn_budget turns.

        scope is None for comment-triggered reviews.
        """
        ...


def run_review(
    decision: TriggerDecision,
    agent: ReviewAgent,
    log: logging.Logger | None = None,
) -> ReviewResult | None:
    """Invoke agent if decision says so; return None when not run."""
    logger = log or logging.getLogger("reviewgate.agents")
    if not decision.should_run or decision.turn_budget is None:
        logger.info("Review not run (%s)", decision.reason or "should_run=false")
        return None
    result = agent.invoke(decision.scope, decision.turn_budget)
    if result.success:
        logger.info("Review finished (budget %s turns)", decision.turn_budget)
    else:
        logger.warning("Review agent failed: exit_code=%s", result.exit_code)
    return result
