"""Local git checkout as a change source (git diff --name-status)."""

import logging
import subprocess
from pathlib import Path
from typing import List

from reviewgate.models import DiffRange
from reviewgate.sources.base import ChangeSource, DiffEnumerationFailure


class GitRunnerError(Exception):
    """Raised when a git command fails."""

    pass


def _run_git(args: list[str], cwd: Path, log: logging.Logger | None = None) -> str:
    """Run git command and return stdout; raise GitRunnerError on non-zero exit."""
    cmd = ["git"] + args
    try:
        result = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True, timeout=60)
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or "").strip()
        if log:
            log.warning("Git %s failed: %s", args, err)
        raise GitRunnerError(f"git {' '.join(args)}: {err}") from e
    except subprocess.TimeoutExpired as e:
        raise GitRunnerError(f"git {' '.join(args)}: timed out") from e
    except FileNotFoundError as e:
        raise GitRunnerError("git not found") from e
    return result.stdout


def parse_name_status(output: str) -> List[str]:
    """Parse `git diff --name-status -z` output into paths.

    Fields are NUL-separated: a status, then one path, or two paths for
    renames and copies (R100/C75), which count under the destination.
    Each path appears once, in diff order.
    """
    paths: List[str] = []
    seen: set[str] = set()
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        status = fields[i]
        if not status:
            i += 1
            continue
        width = 2 if status[:1] in ("R", "C") else 1
        names = fields[i + 1 : i + 1 + width]
        i += 1 + width
        if len(names) < width or not names[-1]:
            continue
        path = names[-1]
        if path not in seen:
            seen.add(path)
            paths.append(path)
    return paths


class GitChangeSource(ChangeSource):
    """Diff two revisions in a local clone.

    Full ranges use three-dot (merge base) semantics; incremental ranges
    diff the two revisions directly.
    """

    def __init__(self, repo_dir: Path | None = None, log: logging.Logger | None = None) -> None:
        self.repo_dir = Path(repo_dir) if repo_dir is not None else Path.cwd()
        self._log = log or logging.getLogger("reviewgate.sources.git")

    def list_changed_paths(self, diff_range: DiffRange) -> List[str]:
        if diff_range.incremental:
            revs = [diff_range.from_revision, diff_range.to_revision]
        else:
            revs = [f"{diff_range.from_revision}...{diff_range.to_revision}"]
        args = ["diff", "--name-status", "-z", "-M", *revs, "--"]
        try:
            output = _run_git(args, cwd=self.repo_dir, log=self._log)
        except GitRunnerError as e:
            raise DiffEnumerationFailure(str(e)) from e
        return parse_name_status(output)

    def has_revision(self, revision: str) -> bool:
        try:
            _run_git(["cat-file", "-e", f"{revision}^{{commit}}"], cwd=self.repo_dir)
        except GitRunnerError:
            return False
        return True
