"""Compose classifier, diff range, path filter and budget into one decision.

One event, one pass, one TriggerDecision. Errors resolve to conservative
defaults: unsupported events and failed diff lookups never run the review.
"""

import logging
from typing import Any, Dict

from reviewgate.models import ChangeSet, EventKind, RepositoryEvent, TriggerDecision
from reviewgate.sources.base import ChangeSource, DiffEnumerationFailure
from reviewgate.trigger.budget import DEFAULT_TURN_BUDGET, turn_budget
from reviewgate.trigger.classifier import UnsupportedEventKind, classify_event, parse_event
from reviewgate.trigger.diff_range import MissingRevisionReference, select_diff_range
from reviewgate.trigger.path_filter import ScopeMatcher, collect_change_set


class TriggerEngine:
    """Decide whether to run the review agent, on which files, with how many turns."""

    def __init__(
        self,
        matcher: ScopeMatcher,
        source: ChangeSource,
        review_request_label: str,
        log: logging.Logger | None = None,
    ) -> None:
        self.matcher = matcher
        self.source = source
        self.review_request_label = review_request_label
        self._log = log or logging.getLogger("reviewgate.trigger.engine")

    def decide_payload(self, event_name: str, payload: Dict[str, Any]) -> TriggerDecision:
        """Parse a GitHub event payload and decide; unsupported events do not run."""
        try:
            event = parse_event(event_name, payload)
        except UnsupportedEventKind as e:
            self._log.info("Skipping review: %s", e)
            return TriggerDecision(should_run=False, reason="unsupported_event")
        return self.decide(event)

    def decide(self, event: RepositoryEvent) -> TriggerDecision:
        classified = classify_event(event, self.review_request_label, log=self._log)
        if classified.is_comment_triggered:
            self._log.info("PR #%s: %s, running with default budget", event.pr_number, event.kind.value)
            return TriggerDecision(
                should_run=True,
                turn_budget=DEFAULT_TURN_BUDGET,
                kind=event.kind,
                reason="comment",
            )

        if event.kind == EventKind.PR_EDITED and not classified.review_requested:
            self._log.info("PR #%s edited without review request checkbox, skipping", event.pr_number)
            return TriggerDecision(should_run=False, kind=event.kind, reason="not_requested")

        try:
            scope = self._collect_scope(event)
        except (MissingRevisionReference, DiffEnumerationFailure) as e:
            self._log.error("PR #%s: cannot determine changed files, not running review: %s", event.pr_number, e)
            return TriggerDecision(should_run=False, kind=event.kind, reason="diff_failed", error=str(e))

        budget = turn_budget(scope.file_count)
        if scope.file_count == 0:
            self._log.info("PR #%s: no in-scope files changed, skipping", event.pr_number)
            return TriggerDecision(
                should_run=False,
                scope=scope,
                turn_budget=budget,
                kind=event.kind,
                reason="no_scope",
            )
        self._log.info(
            "PR #%s: %s in-scope file(s), turn budget %s",
            event.pr_number,
            scope.file_count,
            budget,
        )
        return TriggerDecision(
            should_run=True,
            scope=scope,
            turn_budget=budget,
            kind=event.kind,
            reason="requested" if event.kind == EventKind.PR_EDITED else "changed",
        )

    def _collect_scope(self, event: RepositoryEvent) -> ChangeSet:
        diff_range = select_diff_range(event, revision_exists=self.source.has_revision, log=self._log)
        if diff_range is None:
            raise MissingRevisionReference(f"{event.kind.value}: no diff range")
        return collect_change_set(self.source, diff_range, self.matcher, log=self._log)
