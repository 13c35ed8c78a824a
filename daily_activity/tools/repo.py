"""Repository tools.

These tools give the pipeline structured access to repositories on disk:
- resolve_repository: Reuse, refresh or clone a configured checkout
- collect_files: Flat list of candidate files under a checkout
- read_text / write_text: Byte-faithful text I/O for edits
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from daily_activity.schemas import RepositoryDescriptor
from daily_activity.tools.git_ops import git_clone, git_pull, is_git_repo


logger = logging.getLogger(__name__)

# Directory names never descended into, besides dot-prefixed entries
IGNORED_NAMES = frozenset({"node_modules", "dist", "build"})

CLONE_DIR = "repos"
VCS_DIR = ".git"


def repo_display_name(descriptor: RepositoryDescriptor) -> str:
    """Derive a name: explicit, else from the URL, else from the local path."""
    if descriptor.name:
        return descriptor.name
    if descriptor.url:
        last = descriptor.url.rstrip("/").split("/")[-1]
        return last.removesuffix(".git") or "unknown"
    if descriptor.local_path:
        return os.path.basename(os.path.normpath(descriptor.local_path)) or "unknown"
    return "unknown"


def target_directory(descriptor: RepositoryDescriptor, base_dir: Path) -> Path | None:
    """Where the checkout for descriptor lives, or None if it cannot be placed."""
    if descriptor.local_path:
        local = Path(descriptor.local_path).expanduser()
        return local if local.is_absolute() else (base_dir / local).resolve()
    if descriptor.url:
        return base_dir / CLONE_DIR / repo_display_name(descriptor)
    return None


def resolve_repository(descriptor: RepositoryDescriptor, base_dir: Path) -> Path | None:
    """Make sure a local checkout exists for descriptor.

    Args:
        descriptor: Configured repository entry
        base_dir: Directory relative paths and clones are resolved against

    Returns:
        Path to a usable checkout, or None when the entry is unusable
    """
    name = repo_display_name(descriptor)
    local_path = target_directory(descriptor, base_dir)
    if local_path is None:
        logger.error(f"No valid path or URL for repo: {name}")
        return None

    if local_path.is_dir() and is_git_repo(local_path):
        logger.info(f"Updating existing repo: {name}")
        result = git_pull(local_path)
        if not result.ok:
            logger.warning(f"Could not pull {name}, continuing: {result.error_message}")
        return local_path

    if descriptor.url:
        logger.info(f"Cloning repo: {name}")
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to clone {name}: {e}")
            return None
        result = git_clone(descriptor.url, local_path)
        if not result.ok:
            logger.error(f"Failed to clone {name}: {result.error_message}")
            return None
        return local_path

    logger.error(f"Local path does not exist or is not a git repo: {local_path}")
    return None


def collect_files(
    root: Path,
    extensions: tuple[str, ...],
    *,
    include_vcs_dir: bool = False,
) -> list[Path]:
    """List files under root ending in one of extensions, depth-first.

    Dot-prefixed entries and dependency/build directories are skipped;
    include_vcs_dir still descends into .git.
    """
    found: list[Path] = []

    def walk(path: Path) -> None:
        try:
            entries = sorted(os.listdir(path))
        except OSError:
            return

        for entry in entries:
            full_path = path / entry
            if entry in IGNORED_NAMES:
                continue
            if entry.startswith("."):
                if not (include_vcs_dir and entry == VCS_DIR and full_path.is_dir()):
                    continue
            if full_path.is_dir():
                if not full_path.is_symlink():
                    walk(full_path)
            elif entry.endswith(extensions):
                found.append(full_path)

    walk(root)
    return found


def relative_name(repo_path: Path, file_path: Path) -> str:
    """Repository-relative path with forward slashes, as git expects."""
    return file_path.relative_to(repo_path).as_posix()


def read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
