"""Pipeline coordinator: readiness -> build -> export -> upload.

This module provides the high-level pipeline API:
- resolve_image_reference(): pin a registry path to a digest
- PipelineCoordinator.run(): drive one notification through every stage
  and classify the combined outcome

Classification:
- push reported as failed, readiness timeout, build failure -> Failed
- successful push without a digest -> Warning (nothing can be built)
- export failure or upload stage error -> Partial Success
- upload stage completed -> Success, whatever the per-file failure count
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from lane_notifier.errors import PipelineError, ReadinessTimeoutError
from lane_notifier.readiness import docker_info_check, wait_ready
from lane_notifier.runner import (
    compose_build_command,
    compose_export_command,
    run_command,
)
from lane_notifier.storage import ArtifactUploader
from lane_notifier.types import (
    PipelineOutcome,
    PipelineState,
    PipelineStatus,
    Stage,
    StageResult,
)

if TYPE_CHECKING:
    from pathlib import Path

    from lane_notifier.config import Settings
    from lane_notifier.models import Notification
    from lane_notifier.types import UploadSummary

logger = logging.getLogger(__name__)

PUSH_FAILED_MESSAGE = "Lane push failed"
NO_DIGEST_MESSAGE = "No digest provided in notification"
SUCCESS_MESSAGE = (
    "Notification processed, Lane build and export completed successfully"
)

CommandRunner = Callable[..., StageResult]


def resolve_image_reference(registry_path: str, digest: str) -> str:
    """Pin a registry path to a digest.

    Everything from the first colon of the registry path on (the tag) is
    dropped, e.g. `registry.example.com/app:latest` + `sha256:abc` gives
    `registry.example.com/app@sha256:abc`.

    Args:
        registry_path: Registry path as reported by the push notification.
        digest: Content digest of the pushed image.

    Returns:
        Digest-pinned image reference.
    """
    repository = registry_path.split(":", 1)[0]
    return f"{repository}@{digest}"


class PipelineCoordinator:
    """Runs the build/export/upload pipeline for a push notification.

    Collaborators are injected so tests can substitute them; the coordinator
    itself keeps no state between runs.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        readiness_check: Callable[[], bool] | None = None,
        runner: CommandRunner = run_command,
        uploader: ArtifactUploader | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.readiness_check = readiness_check or docker_info_check(
            settings.docker_binary
        )
        self.runner = runner
        self.uploader = uploader or ArtifactUploader(settings)
        self.clock = clock
        self.sleep = sleep

    def run(self, notification: Notification) -> PipelineOutcome:
        """Process one notification to completion.

        Args:
            notification: Validated push notification.

        Returns:
            Final PipelineOutcome.
        """
        states: list[PipelineState] = []
        stages: list[StageResult] = []

        def enter(state: PipelineState) -> None:
            logger.debug("Pipeline state -> %s", state.value)
            states.append(state)

        def done(
            status: PipelineStatus,
            message: str,
            container: str,
            upload_summary: UploadSummary | None = None,
        ) -> PipelineOutcome:
            enter(PipelineState.DONE)
            return PipelineOutcome(
                status=status,
                message=message,
                container=container,
                states=states,
                stages=stages,
                upload_summary=upload_summary,
            )

        if not notification.success:
            logger.warning("Notification indicates failure")
            return done(
                PipelineStatus.FAILURE,
                PUSH_FAILED_MESSAGE,
                notification.registry_path,
            )

        if not notification.digest:
            enter(PipelineState.RECEIVED_NO_DIGEST)
            logger.warning("No digest provided in notification")
            return done(
                PipelineStatus.WARNING,
                NO_DIGEST_MESSAGE,
                notification.registry_path,
            )

        digest = notification.digest
        image_ref = resolve_image_reference(notification.registry_path, digest)
        logger.info("Building with digest-based image: %s", image_ref)

        enter(PipelineState.WAITING_FOR_DEPENDENCY)
        readiness = self._wait_for_docker()
        stages.append(readiness)
        if not readiness.success:
            return done(
                PipelineStatus.FAILURE,
                f"Lane build failed: {readiness.message}",
                image_ref,
            )

        enter(PipelineState.BUILDING)
        build = self._run_stage(
            Stage.BUILD,
            compose_build_command(
                image_ref,
                lane_binary=self.settings.lane_binary,
                environment=self.settings.lane_environment,
            ),
        )
        stages.append(build)
        if not build.success:
            enter(PipelineState.BUILD_FAILED)
            logger.error("Lane build failed: %s", build.message)
            return done(
                PipelineStatus.FAILURE,
                f"Lane build failed: {build.message}",
                image_ref,
            )

        enter(PipelineState.EXPORTING)
        export = self._run_stage(
            Stage.EXPORT,
            compose_export_command(
                self.settings.export_dir,
                lane_binary=self.settings.lane_binary,
                environment=self.settings.lane_environment,
            ),
        )
        stages.append(export)
        if not export.success:
            logger.warning("Lane export failed: %s", export.message)
            return done(
                PipelineStatus.PARTIAL_SUCCESS,
                f"Lane build succeeded but export failed: {export.message}",
                image_ref,
            )

        enter(PipelineState.UPLOADING)
        upload, summary = self._upload(self.settings.export_dir, digest)
        stages.append(upload)
        if summary is None:
            logger.warning("Upload stage failed: %s", upload.message)
            return done(
                PipelineStatus.PARTIAL_SUCCESS,
                f"Lane build succeeded but export failed: {upload.message}",
                image_ref,
            )

        # Per-file failures are counted but do not downgrade the outcome
        logger.info("Lane export and upload completed successfully")
        return done(PipelineStatus.SUCCESS, SUCCESS_MESSAGE, image_ref, summary)

    def _wait_for_docker(self) -> StageResult:
        try:
            wait_ready(
                self.readiness_check,
                timeout=self.settings.docker_ready_timeout,
                poll_interval=self.settings.docker_poll_interval,
                clock=self.clock,
                sleep=self.sleep,
            )
        except ReadinessTimeoutError as e:
            return StageResult.failed(Stage.READINESS, e)
        return StageResult.ok(Stage.READINESS, "Docker is ready")

    def _run_stage(self, stage: Stage, cmd: list[str]) -> StageResult:
        return self.runner(stage, cmd, timeout=self.settings.stage_timeout)

    def _upload(
        self, export_dir: Path, digest: str
    ) -> tuple[StageResult, UploadSummary | None]:
        logger.info("Starting upload of %s to object storage", export_dir)
        try:
            summary = self.uploader.upload_all(export_dir, digest)
        except PipelineError as e:
            logger.error("Upload stage error (%s): %s", e.kind.value, e)
            return StageResult.failed(Stage.UPLOAD, e), None

        message = f"Uploaded {summary.uploaded} file(s), {summary.failed} failed"
        return StageResult.ok(Stage.UPLOAD, message), summary


__all__ = [
    "NO_DIGEST_MESSAGE",
    "PUSH_FAILED_MESSAGE",
    "SUCCESS_MESSAGE",
    "PipelineCoordinator",
    "resolve_image_reference",
]
