"""Core module exports."""

from brdelta.core.errors import (
    BrDeltaError,
    ConfigError,
    ErrorCode,
    ManifestError,
    WorkspaceInitError,
)
from brdelta.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from brdelta.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "BrDeltaError",
    "ConfigError",
    "ErrorCode",
    "ManifestError",
    "WorkspaceInitError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
