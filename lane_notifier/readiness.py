"""Docker daemon readiness wait.

The Docker daemon is started in the background alongside the server, so the
first Lane build after a (re)start may arrive before it answers. Every
pipeline run polls `docker info` until it succeeds or a deadline passes.
Readiness is never cached because the daemon may restart between requests.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable

from lane_notifier.errors import ReadinessTimeoutError

logger = logging.getLogger(__name__)

# Seconds a single `docker info` check may take before it counts as not ready
CHECK_TIMEOUT = 10

DEFAULT_TIMEOUT = 90.0
DEFAULT_POLL_INTERVAL = 1.0


def docker_info_check(docker_binary: str = "docker") -> Callable[[], bool]:
    """Build a readiness check that runs `docker info`.

    Args:
        docker_binary: Docker executable name or path.

    Returns:
        Callable returning True when the daemon answered successfully.
    """

    def check() -> bool:
        try:
            result = subprocess.run(
                [docker_binary, "info"],
                capture_output=True,
                timeout=CHECK_TIMEOUT,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug("docker info timed out after %ss", CHECK_TIMEOUT)
            return False
        except OSError as e:
            logger.warning("Failed to run %s info: %s", docker_binary, e)
            return False
        return result.returncode == 0

    return check


def wait_ready(
    check: Callable[[], bool],
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    *,
    dependency: str = "Docker",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Poll a readiness check until it passes or the deadline elapses.

    Args:
        check: Check returning True once the dependency is ready.
        timeout: Seconds before giving up.
        poll_interval: Seconds between checks.
        dependency: Name used in log lines and the timeout error.
        clock: Monotonic clock, injectable for tests.
        sleep: Sleep function, injectable for tests.

    Raises:
        ReadinessTimeoutError: If no check succeeded before the deadline.
    """
    deadline = clock() + timeout
    attempts = 0

    while clock() < deadline:
        attempts += 1
        if check():
            logger.info("%s is ready (after %d check(s))", dependency, attempts)
            return
        sleep(poll_interval)

    logger.error(
        "%s did not become ready within %gs (%d check(s))",
        dependency,
        timeout,
        attempts,
    )
    raise ReadinessTimeoutError(timeout, dependency=dependency)


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_TIMEOUT",
    "CHECK_TIMEOUT",
    "docker_info_check",
    "wait_ready",
]
