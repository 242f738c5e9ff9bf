"""brdelta forward command - move recipe versions to an upstream tag or branch tip."""

from pathlib import Path

import click

from brdelta.cli.utils import load_run_config, print_log_hint, read_collection
from brdelta.core.errors import ConfigError, WorkspaceInitError
from brdelta.core.progress import pluralize, status
from brdelta.forward import ForwardReport, forward_packages, split_names
from brdelta.git import RepositoryWorkspace, default_ssh_key


def _print_summary(report: ForwardReport) -> None:
    for outcome in report.updated:
        status(f"{outcome.name}: {outcome.old_version} -> {outcome.new_version}", style="success")
    for outcome in report.failed:
        status(f"{outcome.name}: {outcome.reason}", style="error")
    if report.failed:
        print_log_hint()
    status(
        f"{pluralize(len(report.updated), 'package')} updated, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed",
        style="none",
    )
    if report.limit_reached:
        status("stopped at the package limit", style="warning")


@click.command("forward")
@click.option(
    "-i",
    "--input",
    "input_path",
    type=click.Path(exists=True, path_type=Path),
    default=Path("package.mk"),
    show_default=True,
    help="Recipe file or directory of recipes",
)
@click.option("-w", "--workdir", type=click.Path(path_type=Path), help="Directory for clones")
@click.option(
    "-k",
    "--key",
    type=click.Path(path_type=Path),
    help="Private SSH key for clones [default: ~/.ssh/id_rsa if present]",
)
@click.option("-c", "--clean/--no-clean", default=None, help="Remove the workdir before the run")
@click.option("-b", "--branch", help="Branch whose tip is used [default: origin/master]")
@click.option("-t", "--tag", help="Tag to use instead of the branch tip")
@click.option("-a", "--abbrev", type=click.IntRange(min=0), help="Abbreviate ids to N chars")
@click.option("-s", "--skip", help="Comma-separated packages not to process")
@click.option("-d", "--direct", help="Comma-separated packages to process exclusively")
@click.option("-l", "--limit", type=click.IntRange(min=0), help="Max packages updated, 0 = all")
@click.pass_context
def forward_command(
    ctx: click.Context,
    input_path: Path,
    workdir: Path | None,
    key: Path | None,
    clean: bool | None,
    branch: str | None,
    tag: str | None,
    abbrev: int | None,
    skip: str | None,
    direct: str | None,
    limit: int | None,
) -> None:
    """Rewrite recipe versions to the newest upstream commit.

    Every recipe with a git site gets its version replaced by the commit id of
    --tag, or of the tip of --branch when no tag is given.
    """
    if skip and direct:
        raise click.UsageError("--skip and --direct cannot be used at the same time")

    config = load_run_config(
        ctx,
        workspace={"workdir": workdir, "key": key, "clean": clean},
        forward={
            "branch": branch,
            "tag": tag,
            "abbrev": abbrev,
            "limit": limit,
            "allow": split_names(direct) or None,
            "deny": split_names(skip) or None,
        },
    )
    if config.workspace.key is None:
        config.workspace.key = default_ssh_key()

    packages = read_collection(input_path)

    try:
        with RepositoryWorkspace(config.workspace) as workspace:
            report = forward_packages(packages, workspace, config.forward)
    except (WorkspaceInitError, ConfigError) as e:
        raise click.ClickException(str(e)) from e

    _print_summary(report)
    click.echo("Done")
