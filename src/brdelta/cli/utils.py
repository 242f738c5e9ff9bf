"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from brdelta.config import BrDeltaConfig, load_config
from brdelta.core.errors import ConfigError, ManifestError
from brdelta.core.logging import (
    clear_run_id,
    configure_logging,
    get_log_file_path,
    get_logger,
    set_run_id,
)
from brdelta.core.progress import status
from brdelta.packages import PackageCollection, guess_reader


def _drop_unset(overrides: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
    """Keep only options the user actually passed (click gives None otherwise)."""
    result: dict[str, dict[str, Any]] = {}
    for section, values in overrides.items():
        kept = {k: v for k, v in values.items() if v is not None}
        if kept:
            result[section] = kept
    return result


def load_run_config(ctx: click.Context, **overrides: dict[str, Any]) -> BrDeltaConfig:
    """Resolve configuration for one command and set up logging for the run.

    Raises:
        click.ClickException: If the configuration is invalid.
    """
    obj = ctx.find_root().obj or {}
    try:
        config = load_config(obj.get("config_path"), **_drop_unset(overrides))
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if obj.get("verbose"):
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    run_id = set_run_id()
    ctx.call_on_close(clear_run_id)
    get_logger("cli").debug("run_start", command=ctx.info_name, run_id=run_id)
    return config


def print_log_hint() -> None:
    """Point at the log file, which holds the full error of every failed package."""
    log_file = get_log_file_path()
    if log_file is not None:
        status(f"See {log_file} for details", indent=4)


def read_collection(path: Path) -> PackageCollection:
    """Read a manifest, turning manifest errors into a CLI error."""
    try:
        return guess_reader(path).read()
    except ManifestError as e:
        raise click.ClickException(str(e)) from e
