"""Reviewgate entry point.

Two modes: decide (compute the trigger decision and write step outputs)
and review (decide, then run the review agent when the decision says so).
Usage: reviewgate decide | reviewgate review.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from reviewgate.agents import make_command_agent, run_review
from reviewgate.config import AppConfig, load_config
from reviewgate.logging import ReviewGateLogging
from reviewgate.models import TriggerDecision
from reviewgate.outputs import decision_outputs, load_event_payload, write_github_output
from reviewgate.sources import ChangeSource, GitChangeSource, GitHubChangeSource
from reviewgate.trigger import MalformedScopeRule, ScopeMatcher, TriggerEngine

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (decide | review)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = "decide"
    rest = list(argv)
    if argv and argv[0] in ("decide", "review"):
        sub = argv[0]
        rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="reviewgate",
        description="Reviewgate - decide whether and how broadly to run an AI review",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--event-name",
        default=os.environ.get("GITHUB_EVENT_NAME"),
        help="Webhook event name (default: $GITHUB_EVENT_NAME)",
    )
    parser.add_argument(
        "--event-path",
        type=Path,
        default=os.environ.get("GITHUB_EVENT_PATH"),
        help="Path to event payload JSON (default: $GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--source",
        choices=("git", "github"),
        default="git",
        help="Where to list changed files: local clone or GitHub compare API",
    )
    parser.add_argument(
        "--repo-dir",
        type=Path,
        default=None,
        help="Local clone for --source git (default: cwd)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=os.environ.get("GITHUB_OUTPUT"),
        help="Step output file (default: $GITHUB_OUTPUT)",
    )
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def make_source(config: AppConfig, kind: str, payload: dict[str, Any], repo_dir: Path | None) -> ChangeSource:
    """Build the change source selected on the command line."""
    if kind == "github":
        repo = (payload.get("repository") or {}).get("full_name") or os.environ.get("GITHUB_REPOSITORY", "")
        return GitHubChangeSource(repo, token=config.github_token_resolved, api_url=config.github.api_url)
    return GitChangeSource(repo_dir)


def emit(decision: TriggerDecision, output: Path | None) -> None:
    """Print outputs as JSON and append them to the step output file."""
    outputs = decision_outputs(decision)
    print(json.dumps(outputs, indent=2))
    if output:
        write_github_output(outputs, output)


def main(argv: list[str] | None = None) -> int:
    """Entry point: decide, and for review also run the agent."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")

    config = load_config(config_path)
    ReviewGateLogging(config.logging).setup()
    log = logging.getLogger("reviewgate.main")

    try:
        matcher = ScopeMatcher(config.scope.to_rule())
    except MalformedScopeRule as e:
        log.error("Invalid scope rule: %s", e)
        return EXIT_CONFIG

    if args.check:
        print("Config OK:", ", ".join(config.scope.include_globs))
        return EXIT_OK

    if not args.event_name or not args.event_path:
        log.error("Event name and payload path are required (GITHUB_EVENT_NAME, GITHUB_EVENT_PATH)")
        return EXIT_CONFIG
    try:
        payload = load_event_payload(args.event_path)
    except (OSError, ValueError) as e:
        log.error("Cannot read event payload: %s", e)
        return EXIT_FAILED

    source = make_source(config, args.source, payload, args.repo_dir)
    engine = TriggerEngine(matcher, source, config.trigger.review_request_label)
    decision = engine.decide_payload(args.event_name, payload)
    emit(decision, args.output)
    if decision.failed:
        return EXIT_FAILED

    if args.subcommand == "review":
        result = run_review(decision, make_command_agent(config.agent))
        if result is not None and not result.success:
            return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
