"""Change sources: enumerate paths changed between two revisions."""

from reviewgate.sources.base import ChangeSource, DiffEnumerationFailure
from reviewgate.sources.git import GitChangeSource, GitRunnerError
from reviewgate.sources.github import GitHubChangeSource

__all__ = [
    "ChangeSource",
    "DiffEnumerationFailure",
    "GitChangeSource",
    "GitHubChangeSource",
    "GitRunnerError",
]
