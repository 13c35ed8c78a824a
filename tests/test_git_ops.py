"""Tests for git tooling: cleanliness and the commit driver."""

from __future__ import annotations

from daily_activity.schemas import ChangeRecord, ChangeType, ToolResult
from daily_activity.tools import git_ops
from daily_activity.tools.git_ops import commit_and_push, git_status, is_dirty
from daily_activity.tools.sandbox import run_command
from tests.conftest import git, head_subject, init_repo


README_CHANGE = ChangeRecord(
    file="README.md",
    message="docs: Update README formatting and last updated date",
    type=ChangeType.README,
)


def test_clean_repo_is_not_dirty(tmp_path):
    repo = init_repo(tmp_path / "repo")

    assert is_dirty(repo) is False


def test_untracked_file_makes_repo_dirty(tmp_path):
    repo = init_repo(tmp_path / "repo")
    (repo / "scratch.txt").write_text("wip\n")

    assert is_dirty(repo) is True
    assert git_status(repo).data["entries"] == ["?? scratch.txt"]


def test_modified_file_makes_repo_dirty(tmp_path):
    repo = init_repo(tmp_path / "repo")
    (repo / "README.md").write_text("# Changed\n")

    assert is_dirty(repo) is True


def test_status_failure_counts_as_clean(tmp_path, monkeypatch):
    monkeypatch.setattr(
        git_ops,
        "run_command",
        lambda *args, **kwargs: ToolResult(ok=False, error_code="COMMAND_FAILED", error_message="boom"),
    )

    assert is_dirty(tmp_path) is False


def test_run_command_reports_missing_executable(tmp_path):
    result = run_command(["definitely-not-a-real-binary-xyz"], cwd=tmp_path)

    assert result.ok is False
    assert result.error_code == "COMMAND_NOT_FOUND"


def test_run_command_reports_bad_cwd(tmp_path):
    result = run_command(["git", "status"], cwd=tmp_path / "missing")

    assert result.error_code == "INVALID_CWD"


def test_dry_run_commit_touches_nothing(clone):
    (clone / "README.md").write_text("# Edited\n")

    assert commit_and_push(clone, README_CHANGE, "main", dry_run=True) is True
    assert head_subject(clone) == "initial"
    assert is_dirty(clone) is True


def test_commit_and_push_publishes_one_file(clone, remote_repo):
    (clone / "README.md").write_text("# Edited\n")
    (clone / "other.txt").write_text("not staged\n")

    assert commit_and_push(clone, README_CHANGE, "main", dry_run=False) is True

    assert head_subject(remote_repo, "main") == README_CHANGE.message
    committed = git("show", "--name-only", "--format=", "HEAD", cwd=clone).split()
    assert committed == ["README.md"]
    assert git("status", "--porcelain", cwd=clone).strip() == "?? other.txt"


def test_commit_stops_at_first_failure(clone, remote_repo):
    (clone / "README.md").write_text("# Edited\n")

    assert commit_and_push(clone, README_CHANGE, "no-such-branch", dry_run=False) is False
    assert head_subject(clone) == "initial"
    assert head_subject(remote_repo, "main") == "initial"


def test_push_failure_keeps_local_commit(tmp_path):
    repo = init_repo(tmp_path / "no-remote")
    (repo / "README.md").write_text("# Edited\n")

    assert commit_and_push(repo, README_CHANGE, "main", dry_run=False) is False
    assert head_subject(repo) == README_CHANGE.message
