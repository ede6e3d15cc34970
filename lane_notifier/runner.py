"""Runner for Lane CLI commands.

This module handles:
- Composing `lane build` and `lane export` command lines
- Executing them with subprocess, output streamed to the host's stdout/stderr
- Mapping the exit status to a StageResult

Nothing here retries: one failed invocation is terminal for its stage.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path

from lane_notifier.errors import ProcessFailureError
from lane_notifier.types import Stage, StageResult

logger = logging.getLogger(__name__)


def compose_build_command(
    image_ref: str,
    lane_binary: str = "lane",
    environment: str = "prod",
) -> list[str]:
    """Compose the `lane build` command for a digest-pinned image.

    Args:
        image_ref: Image reference in `<repository>@<digest>` form.
        lane_binary: Lane executable name or path.
        environment: Lane environment name.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    return [lane_binary, "build", environment, "--image", image_ref]


def compose_export_command(
    export_dir: Path | str,
    lane_binary: str = "lane",
    environment: str = "prod",
) -> list[str]:
    """Compose the `lane export` command.

    Args:
        export_dir: Local directory Lane exports into.
        lane_binary: Lane executable name or path.
        environment: Lane environment name.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    return [lane_binary, "export", environment, str(export_dir)]


def run_command(
    stage: Stage,
    cmd: list[str],
    cwd: Path | None = None,
    timeout: int | None = None,
) -> StageResult:
    """Run an external command for a pipeline stage.

    stdout and stderr are inherited so the operator sees the tool's output
    in the service logs; only the exit status is inspected.

    Args:
        stage: Stage the command belongs to.
        cmd: Command and arguments.
        cwd: Optional working directory.
        timeout: Timeout in seconds (None = no timeout).

    Returns:
        StageResult; failures carry a ProcessFailureError.
    """
    cmd_str = shlex.join(cmd)
    logger.info("Starting Lane %s: %s", stage.value, cmd_str)
    started = time.monotonic()

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=None,
            stderr=None,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        error = ProcessFailureError(
            stage,
            exit_code=None,
            command=cmd_str,
            reason=f"timed out after {timeout} seconds",
        )
        logger.error("%s (command: %s)", error, cmd_str)
        return StageResult.failed(stage, error, command=cmd_str)
    except OSError as e:
        error = ProcessFailureError(
            stage,
            exit_code=None,
            command=cmd_str,
            reason=f"could not start process: {e}",
        )
        logger.error("%s (command: %s)", error, cmd_str)
        return StageResult.failed(stage, error, command=cmd_str)

    duration = time.monotonic() - started
    exit_code = result.returncode

    if exit_code != 0:
        # Negative return codes mean the process was killed by a signal
        error = ProcessFailureError(stage, exit_code=exit_code, command=cmd_str)
        logger.error("%s after %.1fs (command: %s)", error, duration, cmd_str)
        return StageResult.failed(
            stage, error, exit_code=exit_code, command=cmd_str
        )

    logger.info("Lane %s completed successfully in %.1fs", stage.value, duration)
    return StageResult.ok(
        stage,
        f"Lane {stage.value} completed successfully",
        exit_code=exit_code,
        command=cmd_str,
    )


__all__ = [
    "compose_build_command",
    "compose_export_command",
    "run_command",
]
