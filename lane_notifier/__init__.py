"""Lane Notifier - registry webhook driven Lane build/export/upload orchestrator.

This package receives image push notifications from a container registry and
drives the Lane CLI through build and export, then ships the exported
artifacts to object storage.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
