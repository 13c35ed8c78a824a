"""Sequential activity workflow.

Per configured repository:
START → resolve → cleanliness check → generate change → commit/push → END
            ↓               ↓                  ↓                ↓
          error            skip               skip            error

One repository's failure never stops the run; outcomes are tallied into a
RunSummary.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from pathlib import Path

from daily_activity.agent.changes import generate_change
from daily_activity.schemas import (
    ActivityConfig,
    RepoOutcome,
    RepositoryDescriptor,
    RunSummary,
)
from daily_activity.tools.git_ops import commit_and_push, is_dirty
from daily_activity.tools.repo import resolve_repository


logger = logging.getLogger(__name__)

SUMMARY_RULE = "=" * 50


def process_repository(
    descriptor: RepositoryDescriptor,
    base_dir: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
    today: date | None = None,
) -> RepoOutcome:
    """Take one configured repository through the pipeline.

    Args:
        descriptor: Configured repository entry
        base_dir: Directory relative paths and clones are resolved against
        dry_run: Compute changes without writing or committing them
        rng: Source of randomness for strategy selection
        today: Date stamped into README markers

    Returns:
        How this repository should be counted in the summary
    """
    logger.info(f"Processing: {descriptor.label}")

    repo_path = resolve_repository(descriptor, base_dir)
    if repo_path is None:
        return RepoOutcome.ERROR

    if is_dirty(repo_path):
        logger.info(f"Skipping {repo_path.name} - has uncommitted changes")
        return RepoOutcome.SKIPPED

    change = generate_change(repo_path, dry_run=dry_run, rng=rng, today=today)
    if change is None:
        logger.info(f"Could not generate change for {repo_path.name}")
        return RepoOutcome.SKIPPED

    logger.info(f"Generated change: {change.message} ({change.file})")

    if not commit_and_push(repo_path, change, descriptor.branch, dry_run=dry_run):
        return RepoOutcome.ERROR

    logger.info(f"Successfully committed to {repo_path.name}")
    return RepoOutcome.SUCCESS


def run(
    config: ActivityConfig,
    base_dir: Path,
    *,
    dry_run: bool = False,
    rng: random.Random | None = None,
    today: date | None = None,
) -> RunSummary:
    """Process every configured repository in order.

    Returns:
        Success, skip and error totals for the run
    """
    rng = rng or random.Random()
    summary = RunSummary()

    for descriptor in config.repositories:
        try:
            outcome = process_repository(
                descriptor, base_dir, dry_run=dry_run, rng=rng, today=today
            )
        except (OSError, ValueError) as e:
            logger.error(f"Error processing {descriptor.label}: {e}")
            outcome = RepoOutcome.ERROR
        summary.record(outcome)

    return summary


def format_summary(summary: RunSummary) -> str:
    """Render the end-of-run totals."""
    return "\n".join([
        SUMMARY_RULE,
        "Summary:",
        f"   Success: {summary.succeeded}",
        f"   Skipped: {summary.skipped}",
        f"   Errors: {summary.errored}",
        SUMMARY_RULE,
    ])
