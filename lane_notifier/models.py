"""Pydantic models for the webhook payloads.

Notification is validated from untrusted registry input and is immutable
once constructed. Response models mirror the JSON returned to the caller.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Notification(BaseModel):
    """One registry push event as delivered to POST /notify."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    notification_type: str = Field(alias="type")
    registry_path: str
    original_path: str
    timestamp: datetime
    success: bool
    profile: str
    platforms: list[str]
    digest: str | None = None


class NotificationResponse(BaseModel):
    """Response body for POST /notify."""

    message: str
    container: str
    status: str
    timestamp: datetime


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    timestamp: datetime


__all__ = ["HealthResponse", "Notification", "NotificationResponse"]
