from pathlib import Path
from typing import Optional

import typer

from crossname.app import CrossnameApp
from crossname.common import crossname_operator as nexus
from crossname.refactor.exceptions import RefactorError
from crossname.refactor.operations import BatchReport
from crossname.cli.rendering import route_messages_to_stderr
from .common import OutputFormat, echo_json, fail, resolve_root


def _render_text(report: BatchReport) -> None:
    count = len(report.mappings)
    if not count:
        typer.echo(nexus("batch.report.empty"))
        return

    header = "batch.report.header_dry_run" if report.dry_run else "batch.report.header"
    typer.echo(nexus(header, count=count))
    typer.echo("")
    for step, mapping in enumerate(report.mappings, start=1):
        typer.echo(
            nexus(
                "batch.report.line",
                step=step,
                count=count,
                old=mapping.old,
                new=mapping.new,
                changes=mapping.changes,
                files=len(mapping.files_touched),
            )
        )
    typer.echo("")
    typer.echo(
        nexus(
            "batch.report.total",
            changes=report.total_changes,
            files=report.total_files,
        )
    )
    typer.echo(nexus("batch.report.circular", count=report.circular_renames))


def batch_command(
    map_file: Path = typer.Option(
        ...,
        "--map",
        "-m",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help=nexus("cli.option.map.help"),
    ),
    path: Path = typer.Option(Path("."), "--path", "-p", help=nexus("cli.option.path.help")),
    dry_run: bool = typer.Option(False, "--dry-run", help=nexus("cli.option.dry_run.help")),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text, "--format", help=nexus("cli.option.format.help")
    ),
    git: bool = typer.Option(False, "--git", help=nexus("cli.option.git.help")),
    git_commit: Optional[str] = typer.Option(
        None, "--git-commit", help=nexus("cli.option.git_commit.help")
    ),
    no_config: bool = typer.Option(
        False, "--no-config", help=nexus("cli.option.no_config.help")
    ),
):
    if output_format is OutputFormat.json:
        route_messages_to_stderr()

    root = resolve_root(path)
    try:
        app = CrossnameApp(root, use_config=not no_config)
        report = app.run_batch(
            map_file=map_file,
            dry_run=dry_run,
            git=git or None,
            git_commit=git_commit,
        )
    except RefactorError as e:
        fail(e)

    if output_format is OutputFormat.json:
        echo_json(report.to_dict(app.root_path))
    else:
        _render_text(report)

    if report.failures:
        raise typer.Exit(code=1)
