"""Config module exports."""

from brdelta.config.loader import load_config
from brdelta.config.models import (
    BrDeltaConfig,
    ForwardConfig,
    HistoryConfig,
    LoggingConfig,
    LogOutputConfig,
    WorkspaceConfig,
)

__all__ = [
    "load_config",
    "BrDeltaConfig",
    "ForwardConfig",
    "HistoryConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "WorkspaceConfig",
]
