"""brdelta diff command - compare two package snapshots and explain the changes."""

from collections import Counter
from pathlib import Path

import click

from brdelta.cli.utils import load_run_config, print_log_hint, read_collection
from brdelta.core.errors import WorkspaceInitError
from brdelta.core.progress import pluralize, status
from brdelta.diff import (
    EnrichmentReport,
    build_diff,
    enrich_diff,
    render_diff,
    write_json_report,
    write_text_report,
)
from brdelta.git import RepositoryWorkspace


def _print_summary(report: EnrichmentReport) -> None:
    status(f"{pluralize(len(report.enriched), 'package')} with history", style="success")
    reasons = Counter(outcome.reason for outcome in report.skipped)
    for reason, count in sorted(reasons.items()):
        status(f"{pluralize(count, 'package')} skipped: {reason}", style="info")
    if report.failed:
        status(f"{pluralize(len(report.failed), 'package')} skipped on errors", style="warning")
        for outcome in report.failed:
            status(f"{outcome.name}: {outcome.reason}", indent=4)
        print_log_hint()


@click.command("diff")
@click.argument("first", type=click.Path(exists=True, path_type=Path))
@click.argument("second", type=click.Path(exists=True, path_type=Path))
@click.option("-w", "--workdir", type=click.Path(path_type=Path), help="Directory for clones")
@click.option("-k", "--key", type=click.Path(path_type=Path), help="Private SSH key for clones")
@click.option("-c", "--clean/--no-clean", default=None, help="Remove the workdir before the run")
@click.option(
    "--short/--full",
    "short",
    default=None,
    help="Follow first parents only (default) or list merged commits too",
)
@click.option("--history/--no-history", default=True, help="Attach upstream commit history")
@click.option("-j", "--jobs", type=click.IntRange(min=1), help="Packages reconciled in parallel")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write report here")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
@click.pass_context
def diff_command(
    ctx: click.Context,
    first: Path,
    second: Path,
    workdir: Path | None,
    key: Path | None,
    clean: bool | None,
    short: bool | None,
    history: bool,
    jobs: int | None,
    output: Path | None,
    fmt: str,
) -> None:
    """Compare package snapshot FIRST (before) with SECOND (after).

    FIRST and SECOND are show-info JSON exports, .mk recipes or directories of
    recipes. Changed packages with a git source get the commits between their
    two versions.
    """
    if fmt == "json" and output is None:
        raise click.UsageError("--format json requires --output")

    config = load_run_config(
        ctx,
        workspace={"workdir": workdir, "key": key, "clean": clean},
        history={"short": short, "max_workers": jobs},
    )

    diff = build_diff(read_collection(first), read_collection(second))

    report: EnrichmentReport | None = None
    if history:
        try:
            with RepositoryWorkspace(config.workspace) as workspace:
                report = enrich_diff(
                    diff,
                    workspace,
                    short_history=config.history.short,
                    max_workers=config.history.max_workers,
                )
        except WorkspaceInitError as e:
            raise click.ClickException(str(e)) from e

    if fmt == "json" and output is not None:
        write_json_report(diff, output, report)
    elif output is not None:
        write_text_report(diff, output)
    else:
        click.echo(render_diff(diff), nl=False)

    status(f"{pluralize(len(diff), 'package')} differ", style="none")
    if report is not None:
        _print_summary(report)
