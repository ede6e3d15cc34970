"""Shared type definitions for lane_notifier.

This module contains the enums and dataclasses passed between the runner,
the uploader and the pipeline coordinator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lane_notifier.errors import PipelineError


class Stage(str, Enum):
    """A discrete unit of pipeline work."""

    READINESS = "readiness"
    BUILD = "build"
    EXPORT = "export"
    UPLOAD = "upload"


class PipelineState(str, Enum):
    """States visited by the pipeline coordinator."""

    RECEIVED_NO_DIGEST = "received_no_digest"
    WAITING_FOR_DEPENDENCY = "waiting_for_dependency"
    BUILDING = "building"
    BUILD_FAILED = "build_failed"
    EXPORTING = "exporting"
    UPLOADING = "uploading"
    DONE = "done"


class PipelineStatus(str, Enum):
    """Final classification of one pipeline run.

    Values are the status strings reported to the webhook caller.
    """

    SUCCESS = "Success"
    PARTIAL_SUCCESS = "Partial Success"
    FAILURE = "Failed"
    WARNING = "Warning"


@dataclass
class StageResult:
    """Outcome of one pipeline stage.

    Attributes:
        stage: Which stage produced the result.
        success: Whether the stage succeeded.
        message: Summary of the stage outcome.
        error: Structured error when the stage failed.
        exit_code: Process exit code for process-backed stages.
        command: Command line for process-backed stages.
    """

    stage: Stage
    success: bool
    message: str
    error: PipelineError | None = None
    exit_code: int | None = None
    command: str | None = None

    @classmethod
    def ok(
        cls,
        stage: Stage,
        message: str,
        exit_code: int | None = None,
        command: str | None = None,
    ) -> StageResult:
        return cls(
            stage=stage,
            success=True,
            message=message,
            exit_code=exit_code,
            command=command,
        )

    @classmethod
    def failed(
        cls,
        stage: Stage,
        error: PipelineError,
        exit_code: int | None = None,
        command: str | None = None,
    ) -> StageResult:
        return cls(
            stage=stage,
            success=False,
            message=str(error),
            error=error,
            exit_code=exit_code,
            command=command,
        )


@dataclass
class UploadSummary:
    """Aggregate result of the upload stage."""

    prefix: str
    uploaded: int = 0
    failed: int = 0
    failed_files: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.uploaded + self.failed

    def record_success(self) -> None:
        self.uploaded += 1

    def record_failure(self, filename: str) -> None:
        self.failed += 1
        self.failed_files.append(filename)


@dataclass
class PipelineOutcome:
    """Final result of a pipeline run.

    Attributes:
        status: Classification of the run.
        message: Human-readable summary for the caller.
        container: Resolved image reference (registry path if none resolved).
        states: Coordinator states visited, in order.
        stages: Results of the stages that ran.
        upload_summary: Upload counts when the upload stage completed.
    """

    status: PipelineStatus
    message: str
    container: str
    states: list[PipelineState] = field(default_factory=list)
    stages: list[StageResult] = field(default_factory=list)
    upload_summary: UploadSummary | None = None

    @property
    def ran_stages(self) -> list[Stage]:
        return [result.stage for result in self.stages]


__all__ = [
    "PipelineOutcome",
    "PipelineState",
    "PipelineStatus",
    "Stage",
    "StageResult",
    "UploadSummary",
]
