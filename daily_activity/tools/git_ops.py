"""Git operations tooling.

Provides the git operations the pipeline needs:
- git_status / is_dirty: Working-tree cleanliness
- git_pull / git_clone: Keep a local checkout available
- git_checkout / git_add / git_commit / git_push: Publish one change
- commit_and_push: The commit driver used by the orchestrator
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from daily_activity.schemas import ChangeRecord, ToolResult
from daily_activity.tools.sandbox import run_command


logger = logging.getLogger(__name__)

GIT = "git"
DEFAULT_REMOTE = "origin"


def git_available() -> bool:
    """Return True when the git executable is on PATH."""
    return shutil.which(GIT) is not None


def is_git_repo(path: Path | str) -> bool:
    """Check whether a directory holds a git checkout."""
    return os.path.exists(os.path.join(path, ".git"))


def git_status(repo_path: Path | str) -> ToolResult:
    """Get porcelain status of the repository.

    Args:
        repo_path: Path to the repository

    Returns:
        ToolResult with the changed entries and an is_clean flag
    """
    result = run_command([GIT, "status", "--porcelain"], cwd=repo_path)
    if not result.ok:
        return result

    entries = [line for line in result.data["stdout"].split("\n") if line.strip()]
    result.data = {
        "entries": entries,
        "is_clean": not entries,
    }
    return result


def is_dirty(repo_path: Path | str) -> bool:
    """Return True iff the working tree has tracked or untracked changes.

    A status query that fails counts as clean.
    """
    result = git_status(repo_path)
    if not result.ok:
        logger.debug(f"git status failed in {repo_path}: {result.error_message}")
        return False
    return not result.data["is_clean"]


def git_pull(repo_path: Path | str) -> ToolResult:
    """Pull the current branch from its upstream."""
    return run_command([GIT, "pull"], cwd=repo_path)


def git_clone(url: str, dest: Path) -> ToolResult:
    """Clone url into dest; dest's parent must already exist."""
    return run_command([GIT, "clone", url, str(dest)], cwd=dest.parent)


def git_checkout(repo_path: Path | str, branch: str) -> ToolResult:
    return run_command([GIT, "checkout", branch], cwd=repo_path)


def git_add(repo_path: Path | str, file_path: str) -> ToolResult:
    return run_command([GIT, "add", "--", file_path], cwd=repo_path)


def git_commit(repo_path: Path | str, message: str) -> ToolResult:
    return run_command([GIT, "commit", "-m", message], cwd=repo_path)


def git_push(repo_path: Path | str, branch: str, remote: str = DEFAULT_REMOTE) -> ToolResult:
    return run_command([GIT, "push", remote, branch], cwd=repo_path)


def commit_and_push(
    repo_path: Path,
    change: ChangeRecord,
    branch: str,
    *,
    dry_run: bool,
) -> bool:
    """Stage, commit and push the single file named by change.

    Args:
        repo_path: Resolved checkout
        change: The edit to publish
        branch: Branch to check out and push
        dry_run: Log the intended commit without touching git

    Returns:
        True when every step succeeded (or in dry-run mode). The first failing
        step stops the sequence; earlier steps are not undone.
    """
    if dry_run:
        logger.info(f"[DRY RUN] Would commit: {change.message}")
        return True

    steps = (
        ("checkout", lambda: git_checkout(repo_path, branch)),
        ("add", lambda: git_add(repo_path, change.file)),
        ("commit", lambda: git_commit(repo_path, change.message)),
        ("push", lambda: git_push(repo_path, branch)),
    )
    for step_name, step in steps:
        result = step()
        if not result.ok:
            logger.error(
                f"Failed to commit to {repo_path.name}: git {step_name} failed: {result.error_message}"
            )
            return False

    return True
