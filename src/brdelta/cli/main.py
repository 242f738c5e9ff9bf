"""brdelta CLI - brdelta command."""

from pathlib import Path

import click

from brdelta.cli.diff import diff_command
from brdelta.cli.forward import forward_command
from brdelta.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="brdelta")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """brdelta - explain package version changes of an embedded build with upstream history."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    # Commands reconfigure once the full configuration is loaded
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(diff_command, name="diff")
cli.add_command(forward_command, name="forward")


if __name__ == "__main__":
    cli()
