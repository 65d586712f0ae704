"""Tests for the local git change source (git diff --name-status)."""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from reviewgate.models import DiffRange, PathScopeRule
from reviewgate.sources.base import DiffEnumerationFailure
from reviewgate.sources.git import GitChangeSource, GitRunnerError, _run_git, parse_name_status
from reviewgate.trigger.path_filter import ScopeMatcher, collect_change_set


class TestParseNameStatus:
    """parse_name_status: NUL-separated fields, renames under the new name."""

    def test_statuses(self) -> None:
        output = "A\0new.ts\0M\0mod.ts\0D\0gone.ts\0"
        assert parse_name_status(output) == ["new.ts", "mod.ts", "gone.ts"]

    def test_rename_and_copy_use_destination(self) -> None:
        output = "R100\0old/a.ts\0new/a.ts\0C75\0src.ts\0copy.ts\0"
        assert parse_name_status(output) == ["new/a.ts", "copy.ts"]

    def test_rename_destination_counted_once(self) -> None:
        """A path that is both rename source and destination counts once."""
        output = "R090\0a.ts\0b.ts\0R090\0b.ts\0a.ts\0M\0b.ts\0"
        assert parse_name_status(output) == ["b.ts", "a.ts"]

    def test_special_characters_kept_verbatim(self) -> None:
        """Quotes, backslashes, tabs and newlines in names are not C-quoted."""
        output = 'A\0tests/say"hi".spec.ts\0M\0tests/back\\slash.ts\0A\0tests/tab\there.ts\0A\0tests/new\nline.ts\0'
        assert parse_name_status(output) == [
            'tests/say"hi".spec.ts',
            "tests/back\\slash.ts",
            "tests/tab\there.ts",
            "tests/new\nline.ts",
        ]

    def test_empty_and_truncated_output(self) -> None:
        assert parse_name_status("") == []
        assert parse_name_status("M\0") == []
        assert parse_name_status("R100\0only-old.ts\0") == []


class TestRunGit:
    """_run_git wraps subprocess errors in GitRunnerError."""

    def test_returns_stdout(self) -> None:
        with patch("reviewgate.sources.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="out\n")
            assert _run_git(["status"], cwd=Path("/tmp/repo")) == "out\n"
        assert mock_run.call_args[0][0] == ["git", "status"]
        assert mock_run.call_args[1]["cwd"] == Path("/tmp/repo")

    def test_called_process_error(self) -> None:
        err = subprocess.CalledProcessError(128, ["git"], output="", stderr="fatal: bad revision")
        with patch("reviewgate.sources.git.subprocess.run", side_effect=err):
            with pytest.raises(GitRunnerError, match="bad revision"):
                _run_git(["diff"], cwd=Path("."))

    def test_git_not_found(self) -> None:
        with patch("reviewgate.sources.git.subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitRunnerError, match="git not found"):
                _run_git(["diff"], cwd=Path("."))


class TestGitChangeSource:
    """GitChangeSource builds diff commands and maps failures."""

    def test_full_range_uses_merge_base(self, tmp_path: Path) -> None:
        with patch("reviewgate.sources.git._run_git", return_value="M\0x.ts\0") as mock_run:
            paths = GitChangeSource(tmp_path).list_changed_paths(DiffRange(from_revision="b", to_revision="h"))
        assert paths == ["x.ts"]
        args = mock_run.call_args[0][0]
        assert "b...h" in args
        assert "--name-status" in args
        assert "-z" in args
        assert "-M" in args
        assert mock_run.call_args[1]["cwd"] == tmp_path

    def test_incremental_range_diffs_directly(self, tmp_path: Path) -> None:
        with patch("reviewgate.sources.git._run_git", return_value="") as mock_run:
            GitChangeSource(tmp_path).list_changed_paths(
                DiffRange(from_revision="p", to_revision="h", incremental=True)
            )
        args = mock_run.call_args[0][0]
        assert args[-3:] == ["p", "h", "--"]

    def test_failure_becomes_diff_enumeration_failure(self, tmp_path: Path) -> None:
        with patch("reviewgate.sources.git._run_git", side_effect=GitRunnerError("unknown revision")):
            with pytest.raises(DiffEnumerationFailure, match="unknown revision"):
                GitChangeSource(tmp_path).list_changed_paths(DiffRange(from_revision="b", to_revision="h"))

    def test_has_revision(self, tmp_path: Path) -> None:
        with patch("reviewgate.sources.git._run_git", return_value=""):
            assert GitChangeSource(tmp_path).has_revision("abc") is True
        with patch("reviewgate.sources.git._run_git", side_effect=GitRunnerError("missing")):
            assert GitChangeSource(tmp_path).has_revision("abc") is False

    def test_defaults_to_cwd(self) -> None:
        assert GitChangeSource().repo_dir == Path.cwd()


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitChangeSourceRepo:
    """GitChangeSource against a real repository."""

    def test_path_with_quote_stays_in_scope(self, tmp_path: Path) -> None:
        """A file name git would C-quote is still matched by the include glob."""
        _git(tmp_path, "init", "-q")
        (tmp_path / "README.md").write_text("base\n", encoding="utf-8")
        _git(tmp_path, "add", "-A")
        _git(tmp_path, "commit", "-q", "-m", "base")
        base = _git(tmp_path, "rev-parse", "HEAD")

        tests_dir = tmp_path / "apps" / "backend-e2e" / "playwright" / "tests"
        tests_dir.mkdir(parents=True)
        (tests_dir / 'say"hi".spec.ts').write_text("test('hi', () => {});\n", encoding="utf-8")
        (tests_dir / "plain.spec.ts").write_text("test('plain', () => {});\n", encoding="utf-8")
        _git(tmp_path, "add", "-A")
        _git(tmp_path, "commit", "-q", "-m", "head")
        head = _git(tmp_path, "rev-parse", "HEAD")

        rule = PathScopeRule(include_globs=("apps/backend-e2e/playwright/**",), exclude_globs=("**/*.md",))
        change_set = collect_change_set(
            GitChangeSource(tmp_path),
            DiffRange(from_revision=base, to_revision=head),
            ScopeMatcher(rule),
        )
        assert change_set.changed_count == 2
        assert change_set.file_count == 2
        assert 'apps/backend-e2e/playwright/tests/say"hi".spec.ts' in change_set.matched_paths

    def test_rename_reported_under_new_path(self, tmp_path: Path) -> None:
        _git(tmp_path, "init", "-q")
        (tmp_path / "old.spec.ts").write_text("test('same content', () => {});\n" * 5, encoding="utf-8")
        _git(tmp_path, "add", "-A")
        _git(tmp_path, "commit", "-q", "-m", "base")
        base = _git(tmp_path, "rev-parse", "HEAD")
        _git(tmp_path, "mv", "old.spec.ts", "new.spec.ts")
        _git(tmp_path, "commit", "-q", "-m", "rename")
        head = _git(tmp_path, "rev-parse", "HEAD")

        paths = GitChangeSource(tmp_path).list_changed_paths(DiffRange(from_revision=base, to_revision=head))
        assert paths == ["new.spec.ts"]
