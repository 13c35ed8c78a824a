"""Change strategies.

Each strategy looks at one repository and proposes a single-file edit:

    readme   -> refresh the "Last updated" marker in the README
    comment  -> insert a canned comment into a source file
    package  -> re-serialise package.json
    docs     -> normalise whitespace in a .md/.txt file
    config   -> normalise whitespace in a root config file

README and comment edits always report a change. The other three report one
only when the normalised text differs from what is on disk.
"""

from __future__ import annotations

import json
import logging
import random
import re
from datetime import date
from pathlib import Path

from daily_activity.schemas import ChangeRecord, ChangeType
from daily_activity.tools.repo import collect_files, read_text, relative_name, write_text


logger = logging.getLogger(__name__)


README_CANDIDATES = ("README.md", "readme.md", "README.txt", "readme.txt")
CODE_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".go", ".rs")
DOC_EXTENSIONS = (".md", ".txt")
CONFIG_CANDIDATES = (".gitignore", ".eslintrc", ".eslintrc.json", "tsconfig.json", "jsconfig.json")
PACKAGE_MANIFEST = "package.json"

COMMENT_POOL = (
    "Improved code organization",
    "Enhanced readability",
    "Better structure for maintainability",
    "Optimized for clarity",
    "Cleaner implementation",
)
COMMENT_MARKERS = ("//", "/*", "*", "#")
HASH_COMMENT_EXTENSIONS = (".py",)

_MARKER = "Last updated:"
_MARKER_PATTERN = re.compile(r"Last updated:(?:[ \t]*\d{4}-\d{2}-\d{2}|[^\r\n]*)")
_SUBHEADING = re.compile(r"^##[^\n]*(?:\n|\Z)", re.MULTILINE)
_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\r?\n)+")
_TRAILING_WHITESPACE = re.compile(r"[ \t]+(?=\r?$)", re.MULTILINE)
_DECLARATION = re.compile(r"(function|const|class|export|def|async)\s+\w+")


# =============================================================================
# Text helpers
# =============================================================================

def strip_trailing_whitespace(content: str) -> str:
    """Remove spaces and tabs at the end of every line."""
    return _TRAILING_WHITESPACE.sub("", content)


def normalize_whitespace(content: str) -> str:
    """Strip trailing whitespace and end non-empty text with exactly one newline."""
    newline = "\r\n" if "\r\n" in content else "\n"
    body = strip_trailing_whitespace(content).rstrip("\r\n")
    return body + newline if body else ""


def touch_last_updated(content: str, today: date) -> str:
    """Insert or refresh the "Last updated" marker in README text."""
    stamp = today.isoformat()
    newline = "\r\n" if "\r\n" in content else "\n"

    if _MARKER in content:
        content = _MARKER_PATTERN.sub(f"Last updated: {stamp}", content)
    else:
        marker_line = f"_Last updated: {stamp}_"
        heading = _SUBHEADING.search(content)
        if heading:
            head = heading.group(0)
            if not head.endswith("\n"):
                head += newline
            rest = _LEADING_BLANK_LINES.sub("", content[heading.end():])
            content = f"{content[:heading.start()]}{head}{newline}{marker_line}{newline}{newline}{rest}"
        else:
            content = f"{marker_line}{newline}{newline}{content}"

    return strip_trailing_whitespace(content)


def find_insert_index(lines: list[str]) -> int:
    """Index of the first declaration-like line that is not a comment.

    Falls back to the middle of the file.
    """
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith(COMMENT_MARKERS):
            continue
        if _DECLARATION.search(line):
            return i
    return len(lines) // 2


def comment_prefix(file_path: Path) -> str:
    return "#" if file_path.suffix in HASH_COMMENT_EXTENSIONS else "//"


def read_source(path: Path) -> str | None:
    """Read a candidate file, or None when it is not valid UTF-8."""
    try:
        return read_text(path)
    except UnicodeDecodeError as e:
        logger.warning(f"Skipping undecodable {path}: {e}")
        return None


# =============================================================================
# Strategies
# =============================================================================

def update_readme(
    repo_path: Path,
    *,
    dry_run: bool = False,
    today: date | None = None,
) -> ChangeRecord | None:
    """Add or refresh the README's "Last updated" line."""
    for candidate in README_CANDIDATES:
        full_path = repo_path / candidate
        if not full_path.is_file():
            continue

        original = read_source(full_path)
        if original is None:
            return None

        content = touch_last_updated(original, today or date.today())
        if not dry_run:
            write_text(full_path, content)

        return ChangeRecord(
            file=candidate,
            message="docs: Update README formatting and last updated date",
            type=ChangeType.README,
        )

    return None


def add_code_comment(
    repo_path: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
) -> ChangeRecord | None:
    """Insert a canned comment above the first declaration of a random source file."""
    rng = rng or random.Random()
    files = collect_files(repo_path, CODE_EXTENSIONS, include_vcs_dir=True)
    if not files:
        return None

    target = rng.choice(files)
    source = read_source(target)
    if source is None:
        return None

    lines = source.split("\n")
    index = find_insert_index(lines)

    indent = ""
    if index < len(lines) and _DECLARATION.search(lines[index]):
        indent = lines[index][: len(lines[index]) - len(lines[index].lstrip())]
    eol = "\r" if any(line.endswith("\r") for line in lines) else ""
    comment = f"{indent}{comment_prefix(target)} {rng.choice(COMMENT_POOL)}{eol}"
    lines.insert(index, comment)

    if not dry_run:
        write_text(target, "\n".join(lines))

    return ChangeRecord(
        file=relative_name(repo_path, target),
        message="refactor: Add clarifying comment to improve code readability",
        type=ChangeType.COMMENT,
    )


def update_package_json(repo_path: Path, *, dry_run: bool = False) -> ChangeRecord | None:
    """Trim the description and re-serialise package.json with two-space indent."""
    full_path = repo_path / PACKAGE_MANIFEST
    if not full_path.is_file():
        return None

    original = read_source(full_path)
    if original is None:
        return None

    try:
        manifest = json.loads(original)
    except json.JSONDecodeError as e:
        logger.warning(f"Skipping unparsable {full_path}: {e}")
        return None

    if isinstance(manifest, dict) and isinstance(manifest.get("description"), str):
        manifest["description"] = manifest["description"].strip()

    updated = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
    if updated == original:
        return None

    if not dry_run:
        write_text(full_path, updated)

    return ChangeRecord(
        file=PACKAGE_MANIFEST,
        message="chore: Clean up package.json formatting",
        type=ChangeType.PACKAGE,
    )


def update_documentation(
    repo_path: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
) -> ChangeRecord | None:
    """Normalise whitespace in a random documentation file."""
    rng = rng or random.Random()
    files = collect_files(repo_path, DOC_EXTENSIONS)
    if not files:
        return None

    target = rng.choice(files)
    original = read_source(target)
    if original is None:
        return None

    content = normalize_whitespace(original)
    if content == original:
        return None

    if not dry_run:
        write_text(target, content)

    return ChangeRecord(
        file=relative_name(repo_path, target),
        message="docs: Improve documentation formatting",
        type=ChangeType.DOCS,
    )


def update_config_file(repo_path: Path, *, dry_run: bool = False) -> ChangeRecord | None:
    """Normalise whitespace in the first conventional config file found."""
    for candidate in CONFIG_CANDIDATES:
        full_path = repo_path / candidate
        if not full_path.is_file():
            continue

        original = read_source(full_path)
        if original is None:
            return None

        content = normalize_whitespace(original)
        if content == original:
            return None

        if not dry_run:
            write_text(full_path, content)

        return ChangeRecord(
            file=candidate,
            message=f"chore: Clean up {candidate} formatting",
            type=ChangeType.CONFIG,
        )

    return None


# =============================================================================
# Public API
# =============================================================================

def apply_strategy(
    change_type: ChangeType,
    repo_path: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
    today: date | None = None,
) -> ChangeRecord | None:
    """Run one named strategy against repo_path."""
    if change_type is ChangeType.README:
        return update_readme(repo_path, dry_run=dry_run, today=today)
    if change_type is ChangeType.COMMENT:
        return add_code_comment(repo_path, dry_run=dry_run, rng=rng)
    if change_type is ChangeType.PACKAGE:
        return update_package_json(repo_path, dry_run=dry_run)
    if change_type is ChangeType.DOCS:
        return update_documentation(repo_path, dry_run=dry_run, rng=rng)
    if change_type is ChangeType.CONFIG:
        return update_config_file(repo_path, dry_run=dry_run)
    raise ValueError(f"Unknown change type: {change_type}")


def generate_change(
    repo_path: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
    today: date | None = None,
) -> ChangeRecord | None:
    """Pick a strategy uniformly at random and apply it.

    Args:
        repo_path: Resolved checkout
        dry_run: Compute the change without writing it
        rng: Source of randomness (default: a fresh Random)
        today: Date stamped into README markers (default: today)

    Returns:
        The change made (or that would be made), or None if the chosen
        strategy found nothing to do
    """
    rng = rng or random.Random()
    change_type = rng.choice(list(ChangeType))
    logger.debug(f"Selected {change_type.value} strategy for {repo_path}")
    return apply_strategy(change_type, repo_path, dry_run=dry_run, rng=rng, today=today)
