"""Review agent implementations (base + command line agent)."""

from reviewgate.agents.base import ReviewAgent, run_review
from reviewgate.agents.command_agent import CommandReviewAgent, build_prompt, make_command_agent

__all__ = ["CommandReviewAgent", "ReviewAgent", "build_prompt", "make_command_agent", "run_review"]
