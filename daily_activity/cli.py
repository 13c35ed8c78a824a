"""CLI entrypoint (Typer).

Usage:
- `daily-activity`            make one commit per eligible configured repository
- `daily-activity --dry-run`  report what would be committed without writing

Meant to be triggered by cron, launchd or Task Scheduler.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import typer

from daily_activity.agent.workflow import format_summary, run
from daily_activity.config import ConfigError, get_settings, load_config
from daily_activity.tools.git_ops import git_available


logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Make small housekeeping commits to configured repositories.",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def append_run_log(path: Path, now: datetime | None = None) -> None:
    """Append the one-line execution record for this invocation."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"[{stamp}] Daily activity script executed\n")
    except OSError as e:
        logger.warning(f"Could not write run log {path}: {e}")


@app.command()
def main(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute changes without writing, committing or pushing."
    ),
) -> None:
    """Run the daily activity pass over every configured repository."""
    settings = get_settings()
    configure_logging(settings.log_level)

    typer.echo("Starting daily GitHub activity automation...")
    if dry_run:
        typer.echo("DRY RUN MODE - No changes will be made")

    if not git_available():
        typer.echo("git is not installed or not in PATH", err=True)
        raise typer.Exit(code=1)

    try:
        try:
            config = load_config(settings.config_path)
        except ConfigError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

        summary = run(config, settings.base_dir, dry_run=dry_run)
        typer.echo(format_summary(summary))
    finally:
        append_run_log(settings.activity_log_path)


if __name__ == "__main__":
    app()
