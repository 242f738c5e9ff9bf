"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI options)
2. Environment variables (BRDELTA__SECTION__KEY)
3. Explicit YAML file (--config)
4. Global YAML (~/.config/brdelta/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    BRDELTA__<SECTION>__<KEY>=<VALUE>

Examples:
    BRDELTA__LOGGING__LEVEL=DEBUG
    BRDELTA__WORKSPACE__WORKDIR=/var/cache/brdelta
    BRDELTA__WORKSPACE__KEY=~/.ssh/id_ed25519
    BRDELTA__HISTORY__SHORT=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BRDELTA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO shows clone/open activity, DEBUG every skip reason.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class WorkspaceConfig(BaseModel):
    """Local clone cache configuration.

    Env vars:
        BRDELTA__WORKSPACE__WORKDIR: Directory holding cached clones
        BRDELTA__WORKSPACE__KEY: Private SSH key for authenticated clones
        BRDELTA__WORKSPACE__CLEAN: Remove the working directory before the run
    """

    workdir: Path = Field(
        default=Path("/tmp/brdelta"),
        description="Directory holding one clone per upstream repository. "
        "Clones are reused across runs and never fetched.",
    )
    key: Path | None = Field(
        default=None,
        description="Private SSH key used for clones. Unset means the SSH agent is used.",
    )
    clean: bool = Field(
        default=False,
        description="Delete the working directory before the run. "
        "RISK: Every repository is cloned again.",
    )

    @field_validator("workdir")
    @classmethod
    def expand_workdir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("key", mode="before")
    @classmethod
    def validate_key(cls, v: object) -> object:
        # Empty string means "no key", as with the --key "" CLI default
        if v is None or v == "":
            return None
        return Path(str(v)).expanduser()


class HistoryConfig(BaseModel):
    """Commit history reconciliation configuration.

    Env vars:
        BRDELTA__HISTORY__SHORT: Follow first parents only
        BRDELTA__HISTORY__MAX_WORKERS: Packages reconciled in parallel
    """

    short: bool = Field(
        default=True,
        description="Follow first parents only, collapsing merged branches to their merge commit.",
    )
    max_workers: int = Field(
        default=1,
        description="Packages reconciled in parallel. Packages sharing an upstream "
        "repository are still processed one at a time.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class ForwardConfig(BaseModel):
    """Version forwarding configuration.

    Env vars:
        BRDELTA__FORWARD__BRANCH: Branch whose tip becomes the new version
        BRDELTA__FORWARD__TAG: Tag to use instead of the branch tip
        BRDELTA__FORWARD__ABBREV: Abbreviated commit id length (0 = full id)
        BRDELTA__FORWARD__LIMIT: Max packages updated (0 = no limit)
    """

    branch: str = Field(
        default="origin/master",
        description="Branch (as seen in the clone, so usually remote-prefixed) whose tip is used.",
    )
    tag: str | None = Field(
        default=None,
        description="Tag to switch to. Takes precedence over branch when set.",
    )
    abbrev: int = Field(
        default=0,
        description="If nonzero, use a unique abbreviation of at least this many characters.",
    )
    limit: int = Field(
        default=0,
        description="Stop after this many packages were updated. 0 means no limit.",
    )
    allow: list[str] = Field(
        default_factory=list,
        description="Process only these packages.",
    )
    deny: list[str] = Field(
        default_factory=list,
        description="Never process these packages.",
    )

    @field_validator("tag", mode="before")
    @classmethod
    def validate_tag(cls, v: object) -> object:
        return v or None

    @field_validator("abbrev", "limit")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must be >= 0, got {v}")
        return v


class BrDeltaConfig(BaseModel):
    """Root configuration for brdelta."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    forward: ForwardConfig = Field(default_factory=ForwardConfig)
