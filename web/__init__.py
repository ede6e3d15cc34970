"""FastAPI web application for Lane Notifier.

This module provides the webhook HTTP API. All pipeline logic is delegated
to lane_notifier.pipeline.
"""

from web.app import app, create_app

__all__ = ["app", "create_app"]
