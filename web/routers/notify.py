"""Registry push webhook endpoint.

POST /notify
- 200 for Success, Warning and Partial Success
- 500 for Failed (push failed, Docker never ready, build failed)
- 422 for a body that does not match the Notification shape; the pipeline
  is not invoked
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from fastapi.responses import JSONResponse

from lane_notifier.models import Notification, NotificationResponse
from lane_notifier.pipeline import PipelineCoordinator
from lane_notifier.types import PipelineOutcome, PipelineStatus
from web.deps import get_coordinator

logger = logging.getLogger(__name__)

router = APIRouter()


def _status_code(outcome: PipelineOutcome) -> int:
    if outcome.status == PipelineStatus.FAILURE:
        return http_status.HTTP_500_INTERNAL_SERVER_ERROR
    return http_status.HTTP_200_OK


def _log_notification(notification: Notification) -> None:
    logger.info("Lane Notification Received:")
    logger.info("   Type: %s", notification.notification_type)
    logger.info("   Registry Path: %s", notification.registry_path)
    logger.info("   Original Path: %s", notification.original_path)
    logger.info("   Success: %s", notification.success)
    logger.info("   Profile: %s", notification.profile)
    logger.info("   Platforms: %s", notification.platforms)
    logger.info("   Timestamp: %s", notification.timestamp.isoformat())
    if notification.digest:
        logger.info("   Digest: %s", notification.digest)


@router.post("/notify", response_model=NotificationResponse)
def notify(
    notification: Notification,
    coordinator: PipelineCoordinator = Depends(get_coordinator),
) -> JSONResponse:
    """Run the Lane pipeline for a registry push.

    Declared as a plain function so the blocking pipeline runs in the
    threadpool instead of on the event loop.

    Args:
        notification: Validated push notification.
        coordinator: Pipeline coordinator.

    Returns:
        Outcome message, resolved container reference and status.
    """
    received_at = datetime.now(timezone.utc)
    _log_notification(notification)

    outcome = coordinator.run(notification)

    if outcome.upload_summary is not None:
        logger.info(
            "Upload summary for %s: uploaded=%d failed=%d",
            outcome.upload_summary.prefix,
            outcome.upload_summary.uploaded,
            outcome.upload_summary.failed,
        )

    body = NotificationResponse(
        message=outcome.message,
        container=outcome.container,
        status=outcome.status.value,
        timestamp=received_at,
    )
    return JSONResponse(
        status_code=_status_code(outcome),
        content=body.model_dump(mode="json"),
    )
