"""Tests for readiness.py module.

Uses a fake clock and sleep so no test actually waits.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from lane_notifier.errors import ReadinessTimeoutError
from lane_notifier.readiness import CHECK_TIMEOUT, docker_info_check, wait_ready


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestWaitReady:
    """Tests for wait_ready function."""

    def test_returns_immediately_when_ready(self):
        """Should not sleep when the first check succeeds."""
        clock = FakeClock()
        check = MagicMock(return_value=True)

        wait_ready(check, timeout=90, poll_interval=1, clock=clock, sleep=clock.sleep)

        assert check.call_count == 1
        assert clock.sleeps == []

    def test_polls_until_ready(self):
        """Should keep polling on the interval until a check succeeds."""
        clock = FakeClock()
        check = MagicMock(side_effect=[False, False, True])

        wait_ready(check, timeout=90, poll_interval=1, clock=clock, sleep=clock.sleep)

        assert check.call_count == 3
        assert clock.sleeps == [1, 1]

    def test_times_out(self):
        """Should raise once the deadline elapses without a ready check."""
        clock = FakeClock()
        check = MagicMock(return_value=False)

        with pytest.raises(ReadinessTimeoutError) as exc_info:
            wait_ready(
                check, timeout=90, poll_interval=1, clock=clock, sleep=clock.sleep
            )

        assert exc_info.value.timeout == 90
        assert check.call_count == 90
        assert clock.now == 90
        assert "did not become ready within 90 seconds" in str(exc_info.value)

    def test_respects_poll_interval(self):
        """Should sleep for the configured interval between checks."""
        clock = FakeClock()
        check = MagicMock(return_value=False)

        with pytest.raises(ReadinessTimeoutError):
            wait_ready(
                check, timeout=10, poll_interval=2.5, clock=clock, sleep=clock.sleep
            )

        assert set(clock.sleeps) == {2.5}
        assert check.call_count == 4


class TestDockerInfoCheck:
    """Tests for docker_info_check check."""

    def test_ready_on_zero_exit(self):
        """Should report ready when docker info exits 0."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert docker_info_check()() is True

            args, kwargs = mock_run.call_args
            assert args[0] == ["docker", "info"]
            assert kwargs["timeout"] == CHECK_TIMEOUT
            assert kwargs["capture_output"] is True

    def test_not_ready_on_nonzero_exit(self):
        """Should report not ready when docker info fails."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            assert docker_info_check()() is False

    def test_not_ready_on_check_timeout(self):
        """A hung docker info counts as not ready."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["docker"], CHECK_TIMEOUT)
            assert docker_info_check()() is False

    def test_not_ready_when_docker_missing(self):
        """A missing docker binary counts as not ready."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("docker")
            assert docker_info_check()() is False

    def test_custom_binary(self):
        """Should run the configured docker binary."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            docker_info_check("/usr/local/bin/docker")()
            assert mock_run.call_args[0][0] == ["/usr/local/bin/docker", "info"]
