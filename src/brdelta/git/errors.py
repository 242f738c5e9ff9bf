"""Git module error types.

Every error here concerns a single package. The enrichment and forward passes
catch them, record a skip and carry on with the next package.
"""


class GitError(Exception):
    """Base error for git operations."""

    reason = "git-error"


# =============================================================================
# Workspace Errors
# =============================================================================


class WorkspaceError(GitError):
    """Repository could not be made available locally."""

    reason = "workspace-error"


class NameResolutionError(WorkspaceError):
    """No local directory name can be derived from the source URL."""

    reason = "name-resolution"

    def __init__(self, uri: str) -> None:
        super().__init__(f"Cannot derive repository name from {uri!r}: expected '<...>/<name>.git'")
        self.uri = uri


class CloneError(WorkspaceError):
    """Cloning the upstream repository failed."""

    reason = "clone-failed"

    def __init__(self, uri: str, message: str) -> None:
        super().__init__(f"Clone of {uri} failed: {message}")
        self.uri = uri
        self.message = message


class OpenError(WorkspaceError):
    """Local directory exists but is not a git repository."""

    reason = "open-failed"

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


# =============================================================================
# History Errors
# =============================================================================


class HistoryError(GitError):
    """Commit history between two versions could not be built."""

    reason = "history-error"


class ReferenceNotFoundError(HistoryError):
    """Version string does not resolve to a commit."""

    reason = "reference-not-found"

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class RangeWalkError(HistoryError):
    """Commit walker for a range could not be set up or iterated."""

    reason = "range-walk-failed"

    def __init__(self, commit_range: str, message: str) -> None:
        super().__init__(f"Cannot walk {commit_range}: {message}")
        self.commit_range = commit_range
        self.message = message
