"""Error taxonomy for pipeline stages.

Every failure a pipeline stage can produce is an instance of PipelineError
tagged with an ErrorKind and carrying structured detail (exit code, file
name, path...). Turning that detail into text is done by render_error(),
so callers that need the structured fields never parse messages.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lane_notifier.types import Stage


class ErrorKind(str, Enum):
    """Kind of failure raised by a pipeline stage."""

    TIMEOUT = "timeout"
    PROCESS_FAILURE = "process_failure"
    MISSING_DIRECTORY = "missing_directory"
    TRANSFER_FAILURE = "transfer_failure"
    MISSING_CREDENTIALS = "missing_credentials"
    STORAGE_CONFIGURATION = "storage_configuration"


class PipelineError(Exception):
    """Base error for pipeline stage failures."""

    kind: ErrorKind

    def __init__(self, code: str) -> None:
        super().__init__(render_error(self))
        self.code = code


class ReadinessTimeoutError(PipelineError):
    """Raised when the Docker daemon does not become ready in time."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float, dependency: str = "Docker") -> None:
        self.timeout = timeout
        self.dependency = dependency
        super().__init__(code="dependency_timeout")


class ProcessFailureError(PipelineError):
    """Raised when an external command fails to launch or exits non-zero.

    Attributes:
        stage: Stage the command belonged to.
        exit_code: Process exit code, or None if it never produced one
            (launch failure, timeout, killed by signal).
        command: The command line that was executed.
        reason: Extra detail when there is no exit code.
    """

    kind = ErrorKind.PROCESS_FAILURE

    def __init__(
        self,
        stage: Stage,
        exit_code: int | None,
        command: str,
        reason: str | None = None,
    ) -> None:
        self.stage = stage
        self.exit_code = exit_code
        self.command = command
        self.reason = reason
        super().__init__(code=f"{stage.value}_failed")


class MissingDirectoryError(PipelineError):
    """Raised when the export directory to upload from does not exist."""

    kind = ErrorKind.MISSING_DIRECTORY

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(code="missing_directory")


class TransferFailureError(PipelineError):
    """Raised when a single file could not be uploaded."""

    kind = ErrorKind.TRANSFER_FAILURE

    def __init__(
        self,
        filename: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self.filename = filename
        self.reason = reason
        self.status_code = status_code
        super().__init__(code="transfer_failed")


class MissingCredentialsError(PipelineError):
    """Raised when storage credentials are needed but not configured."""

    kind = ErrorKind.MISSING_CREDENTIALS

    def __init__(self, variables: tuple[str, ...]) -> None:
        self.variables = variables
        super().__init__(code="missing_credentials")


class StorageConfigurationError(PipelineError):
    """Raised when the object storage client cannot be created."""

    kind = ErrorKind.STORAGE_CONFIGURATION

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(code="storage_configuration")


def render_error(error: PipelineError) -> str:
    """Render a human-readable message for a pipeline error.

    Args:
        error: The error to describe.

    Returns:
        Message suitable for logs and response bodies.
    """
    if isinstance(error, ReadinessTimeoutError):
        return (
            f"{error.dependency} did not become ready within "
            f"{error.timeout:g} seconds"
        )
    if isinstance(error, ProcessFailureError):
        name = f"Lane {error.stage.value}"
        if error.exit_code is not None:
            return f"{name} failed with exit code {error.exit_code}"
        return f"{name} failed: {error.reason or 'no exit status'}"
    if isinstance(error, MissingDirectoryError):
        return f"Export directory '{error.path}' does not exist"
    if isinstance(error, TransferFailureError):
        if error.status_code is not None:
            return (
                f"Failed to upload {error.filename}: "
                f"upload failed with status code {error.status_code}"
            )
        return f"Failed to upload {error.filename}: {error.reason}"
    if isinstance(error, MissingCredentialsError):
        return " or ".join(error.variables) + " environment variable not set"
    if isinstance(error, StorageConfigurationError):
        return f"Cannot create storage client for {error.endpoint}: {error.reason}"
    return error.kind.value


__all__ = [
    "ErrorKind",
    "MissingCredentialsError",
    "MissingDirectoryError",
    "PipelineError",
    "ProcessFailureError",
    "ReadinessTimeoutError",
    "StorageConfigurationError",
    "TransferFailureError",
    "render_error",
]
