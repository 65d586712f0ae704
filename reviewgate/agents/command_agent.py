"""
Command line review agent: runs a headless agent CLI with a turn cap.

The prompt is the optional markdown style guide followed by the review
instructions and, for pull request events, the list of in-scope files.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List

from reviewgate.agents.base import ReviewAgent
from reviewgate.config import AgentConfig
from reviewgate.models import ChangeSet, ReviewResult


def build_prompt(scope: ChangeSet | None, style_guide: str | None = None) -> str:
    """Build the review prompt for scope (None for comment-triggered runs)."""
    sections: List[str] = []
    if style_guide and style_guide.strip():
        sections.append(style_guide.strip())
    if scope is None:
        sections.append(
            "A reviewer asked for help in a pull request comment. "
            "Answer it, looking only at the code the comment discusses."
        )
    else:
        files = "\n".join(f"- {p}" for p in scope.matched_paths)
        sections.append(
            f"Review the changes to these {scope.file_count} file(s) in this pull request "
            f"and post inline comments for issues you find:\n{files}"
        )
    return "\n\n".join(sections)


class CommandReviewAgent(ReviewAgent):
    """Run an agent CLI: <command> <args> <max_turns_flag> N [--model M] <prompt>."""

    def __init__(
        self,
        command: str = "claude",
        args: List[str] | None = None,
        max_turns_flag: str = "--max-turns",
        prompt_file: str | None = None,
        timeout: int = 1800,
        working_directory: str = ".",
        model: str | None = None,
        token: str | None = None,
        token_env: str = "ANTHROPIC_API_KEY",
        log: logging.Logger | None = None,
    ) -> None:
        self.command = command
        self.args = list(args) if args is not None else ["-p"]
        self.max_turns_flag = max_turns_flag
        self.prompt_file = prompt_file
        self.timeout = timeout
        self.working_directory = working_directory
        self.model = model
        self.token = token
        self.token_env = token_env
        self._log = log or logging.getLogger("reviewgate.agents.command")

    def _style_guide(self) -> str | None:
        if not self.prompt_file:
            return None
        path = Path(self.prompt_file)
        if not path.is_absolute():
            path = Path(self.working_directory) / path
        if not path.is_file():
            self._log.warning("Style guide %s not found, reviewing without it", path)
            return None
        return path.read_text(encoding="utf-8")

    def build_command(self, scope: ChangeSet | None, turn_budget: int) -> List[str]:
        cmd = [self.command, *self.args, self.max_turns_flag, str(turn_budget)]
        if self.model:
            cmd.extend(["--model", self.model])
        cmd.append(build_prompt(scope, self._style_guide()))
        return cmd

    def invoke(self, scope: ChangeSet | None, turn_budget: int) -> ReviewResult:
        cmd = self.build_command(scope, turn_budget)
        env = os.environ.copy()
        if self.token:
            env[self.token_env] = self.token

        self._log.info(
            "Running review agent: %s (max turns=%s, timeout=%ss)",
            self.command,
            turn_budget,
            self.timeout,
        )
        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_directory,
                env=env,
                timeout=self.timeout,
                check=False,
                capture_output=True,
                text=True,
            )
        except subprocess.TimeoutExpired:
            self._log.warning("Review agent timed out after %s seconds", self.timeout)
            return ReviewResult(success=False, output=f"timed out after {self.timeout}s", turn_budget=turn_budget)
        except FileNotFoundError as e:
            self._log.warning("Review agent not found: %s", e)
            return ReviewResult(success=False, output=str(e), turn_budget=turn_budget)

        out = ((result.stdout or "") + (result.stderr or "")).strip()
        return ReviewResult(
            success=result.returncode == 0,
            exit_code=result.returncode,
            output=out,
            turn_budget=turn_budget,
        )


def make_command_agent(config: AgentConfig) -> CommandReviewAgent:
    """Build CommandReviewAgent from agent config and the token in env."""
    return CommandReviewAgent(
        command=config.command,
        args=config.args,
        max_turns_flag=config.max_turns_flag,
        prompt_file=config.prompt_file,
        timeout=config.timeout,
        working_directory=config.working_directory,
        model=config.model,
        token=os.environ.get(config.token_env),
        token_env=config.token_env,
    )
