"""Git module: workspace of upstream clones and history reconciliation."""

from brdelta.git.credentials import KeyFileCredentials, default_ssh_key, make_callbacks
from brdelta.git.errors import (
    CloneError,
    GitError,
    HistoryError,
    NameResolutionError,
    OpenError,
    RangeWalkError,
    ReferenceNotFoundError,
    WorkspaceError,
)
from brdelta.git.history import HistoryReconciler
from brdelta.git.models import HistoryRecord
from brdelta.git.workspace import RepositoryWorkspace, repo_dir_name

__all__ = [
    # Main classes
    "RepositoryWorkspace",
    "HistoryReconciler",
    "repo_dir_name",
    # Models
    "HistoryRecord",
    # Credentials
    "KeyFileCredentials",
    "default_ssh_key",
    "make_callbacks",
    # Errors
    "GitError",
    "WorkspaceError",
    "NameResolutionError",
    "CloneError",
    "OpenError",
    "HistoryError",
    "ReferenceNotFoundError",
    "RangeWalkError",
]
