"""brdelta fatal error types with typed error codes.

Errors in this module stop a run. Per-package failures (clone, reference
lookup, range walk) live in ``brdelta.git.errors`` and are recovered by the
enrichment and forward passes instead.

Error code ranges:
- 2xxx: Config
- 3xxx: Manifest
- 4xxx: Workspace
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Manifest (3xxx)
    MANIFEST_NOT_FOUND = 3001
    MANIFEST_PARSE_ERROR = 3002
    MANIFEST_EMPTY = 3003

    # Workspace (4xxx)
    WORKSPACE_CLEAN_FAILED = 4001
    WORKSPACE_CREATE_FAILED = 4002


@dataclass(frozen=True, slots=True)
class BrDeltaError(Exception):
    """Base error with structured context for reports and exit messages."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(BrDeltaError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ManifestError(BrDeltaError):
    """A package manifest could not be read."""

    @classmethod
    def not_found(cls, path: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_NOT_FOUND,
            message=f"Manifest not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_PARSE_ERROR,
            message=f"Failed to parse manifest at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def empty(cls, path: str, failed: int) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_EMPTY,
            message=f"No recipes could be read from {path} ({failed} failed)",
            details={"path": path, "failed": failed},
        )


class WorkspaceInitError(BrDeltaError):
    """The working directory could not be prepared."""

    @classmethod
    def clean_failed(cls, path: str, reason: str) -> "WorkspaceInitError":
        return cls(
            code=ErrorCode.WORKSPACE_CLEAN_FAILED,
            message=f"Failed to remove working directory {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def create_failed(cls, path: str, reason: str) -> "WorkspaceInitError":
        return cls(
            code=ErrorCode.WORKSPACE_CREATE_FAILED,
            message=f"Failed to create working directory {path}: {reason}",
            details={"path": path, "reason": reason},
        )
