"""Pipeline dependencies for FastAPI.

Settings are read once per process; each request gets a coordinator built
from them. Tests replace get_coordinator via app.dependency_overrides.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from lane_notifier.config import Settings, get_settings
from lane_notifier.pipeline import PipelineCoordinator


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    """Get process-wide settings, loaded on first use.

    Returns:
        Settings instance shared by all requests.
    """
    return get_settings()


def get_coordinator(
    settings: Settings = Depends(get_app_settings),
) -> PipelineCoordinator:
    """Provide a pipeline coordinator for a request.

    Returns:
        PipelineCoordinator bound to the process settings.
    """
    return PipelineCoordinator(settings)
