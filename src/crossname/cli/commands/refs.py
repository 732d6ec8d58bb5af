from pathlib import Path

import typer

from crossname.app import CrossnameApp
from crossname.common import crossname_operator as nexus
from crossname.refactor.engine import ReferenceReport
from crossname.refactor.exceptions import RefactorError
from crossname.spec import ReferenceRole
from crossname.cli.rendering import route_messages_to_stderr
from .common import OutputFormat, echo_json, fail, resolve_root

_SECTIONS = [
    (ReferenceRole.DEFINITION, "Definitions"),
    (ReferenceRole.REFERENCE, "References"),
    (ReferenceRole.IMPORT, "Imports"),
    (ReferenceRole.EXPORT, "Exports"),
    (ReferenceRole.PARAMETER, "Parameters"),
]


def _render_text(report: ReferenceReport, root: Path) -> None:
    if not report.total:
        typer.echo(nexus("refs.report.none", symbol=report.symbol))
        return

    typer.echo(nexus("refs.report.header", symbol=report.symbol, count=report.total))
    for role, title in _SECTIONS:
        entries = report.entries(role, root)
        if not entries:
            continue
        typer.echo("")
        typer.echo(nexus("refs.report.section", title=title, count=len(entries)))
        for entry in entries:
            typer.echo(f"  {entry}")


def refs_command(
    symbol: str = typer.Argument(..., help=nexus("cli.option.symbol.help")),
    path: Path = typer.Option(Path("."), "--path", "-p", help=nexus("cli.option.path.help")),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text, "--format", help=nexus("cli.option.format.help")
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
        report = app.run_refs(symbol)
    except RefactorError as e:
        fail(e)

    if output_format is OutputFormat.json:
        echo_json(report.to_dict(app.root_path))
    else:
        _render_text(report, app.root_path)
