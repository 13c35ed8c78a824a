"""Controlled execution of external commands.

Runs version-control commands on behalf of the pipeline:
- Arguments passed as an argv list, never through a shell
- Optional timeout from settings
- Capture stdout/stderr into a ToolResult
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Sequence

from daily_activity.config import get_settings
from daily_activity.schemas import ToolResult


def run_command(
    args: Sequence[str],
    cwd: Path | str,
    timeout: int | None = None,
    env: dict[str, str] | None = None,
) -> ToolResult:
    """Run a command and capture its output.

    Args:
        args: Command and its arguments
        cwd: Working directory
        timeout: Command timeout in seconds (default: settings.git_timeout_seconds)
        env: Additional environment variables

    Returns:
        ToolResult with command output
    """
    import time
    start = time.perf_counter()

    if timeout is None:
        timeout = get_settings().git_timeout_seconds

    if not args:
        return ToolResult(
            ok=False,
            error_code="EMPTY_COMMAND",
            error_message="Command is empty",
        )

    command = " ".join(args)

    if not os.path.isdir(cwd):
        return ToolResult(
            ok=False,
            error_code="INVALID_CWD",
            error_message=f"Working directory does not exist: {cwd}",
        )

    run_env = None
    if env:
        run_env = os.environ.copy()
        run_env.update(env)

    try:
        result = subprocess.run(
            list(args),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            env=run_env,
        )

        latency_ms = int((time.perf_counter() - start) * 1000)
        error_message = None
        if result.returncode != 0:
            error_message = result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"

        return ToolResult(
            ok=result.returncode == 0,
            data={
                "stdout": result.stdout,
                "stderr": result.stderr,
                "exit_code": result.returncode,
                "command": command,
            },
            error_code="COMMAND_FAILED" if result.returncode != 0 else None,
            error_message=error_message,
            latency_ms=latency_ms,
        )

    except subprocess.TimeoutExpired:
        return ToolResult(
            ok=False,
            error_code="COMMAND_TIMEOUT",
            error_message=f"{command} timed out after {timeout} seconds",
            data={"command": command},
        )
    except FileNotFoundError:
        return ToolResult(
            ok=False,
            error_code="COMMAND_NOT_FOUND",
            error_message=f"Executable not found: {args[0]}",
            data={"command": command},
        )
    except OSError as e:
        return ToolResult(
            ok=False,
            error_code="EXECUTION_ERROR",
            error_message=str(e),
            data={"command": command},
        )
