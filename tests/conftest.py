"""Shared fixtures: isolated git identity and throwaway repositories."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from daily_activity.config import get_settings


def git(*args: str, cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def init_repo(path: Path, files: dict[str, str] | None = None) -> Path:
    """Create a repository on branch main with one commit of files."""
    path.mkdir(parents=True, exist_ok=True)
    git("init", "-q", cwd=path)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=path)
    for name, content in (files or {"README.md": "# Project\n"}).items():
        target = path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8", newline="")
    git("add", "-A", cwd=path)
    git("commit", "-q", "-m", "initial", cwd=path)
    return path


def head_subject(repo: Path, ref: str = "HEAD") -> str:
    return git("log", "-1", "--format=%s", ref, cwd=repo).strip()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Keep git and settings away from the developer's own configuration."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Activity Bot")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "bot@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Activity Bot")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "bot@example.com")
    for var in (
        "DAILY_ACTIVITY_CONFIG_FILE",
        "DAILY_ACTIVITY_ACTIVITY_LOG",
        "DAILY_ACTIVITY_LOG_LEVEL",
        "DAILY_ACTIVITY_GIT_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def remote_repo(tmp_path) -> Path:
    """Bare repository whose main branch holds a README with a ## heading."""
    remote = tmp_path / "remote.git"
    remote.mkdir()
    git("init", "-q", "--bare", cwd=remote)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=remote)

    seed = init_repo(
        tmp_path / "seed",
        {"README.md": "# Project\n\n## Usage\n\nRun it.\n"},
    )
    git("remote", "add", "origin", str(remote), cwd=seed)
    git("push", "-q", "origin", "main", cwd=seed)
    return remote


@pytest.fixture
def clone(tmp_path, remote_repo) -> Path:
    """Working copy of remote_repo on main, tracking origin."""
    work = tmp_path / "work"
    work.mkdir()
    git("clone", "-q", str(remote_repo), "project", cwd=work)
    return work / "project"
