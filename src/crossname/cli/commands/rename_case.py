from pathlib import Path
from typing import Optional

import typer

from crossname.app import CrossnameApp
from crossname.common import crossname_operator as nexus
from crossname.refactor.exceptions import RefactorError
from crossname.refactor.naming import NamingCase
from crossname.cli.rendering import route_messages_to_stderr
from .common import OutputFormat, echo_json, fail, resolve_root
from .rename import _build_scope, _render_text


def rename_case_command(
    symbol: str = typer.Argument(..., help=nexus("cli.option.old.help")),
    case: NamingCase = typer.Option(
        ..., "--to", case_sensitive=False, help=nexus("cli.option.case.help")
    ),
    path: Path = typer.Option(Path("."), "--path", "-p", help=nexus("cli.option.path.help")),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help=nexus("cli.option.file.help")
    ),
    start_line: Optional[int] = typer.Option(
        None, "--start-line", help=nexus("cli.option.start_line.help")
    ),
    end_line: Optional[int] = typer.Option(
        None, "--end-line", help=nexus("cli.option.end_line.help")
    ),
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
        scope = _build_scope(file, start_line, end_line)
        app = CrossnameApp(root, use_config=not no_config)
        result = app.run_rename_case(
            symbol,
            case,
            scope=scope,
            dry_run=dry_run,
            git=git or None,
            git_commit=git_commit,
        )
    except RefactorError as e:
        fail(e)

    if output_format is OutputFormat.json:
        echo_json(result.to_dict(app.root_path))
    elif result.old != result.new:
        _render_text(result, app.root_path)

    if result.failures:
        raise typer.Exit(code=1)
