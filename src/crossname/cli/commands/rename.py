from pathlib import Path
from typing import FrozenSet, Optional

import typer

from crossname.app import CrossnameApp
from crossname.common import crossname_operator as nexus
from crossname.refactor.exceptions import InputError, RefactorError
from crossname.refactor.engine import LineSelection
from crossname.refactor.operations import RenameResult, RenameScope
from crossname.cli.rendering import route_messages_to_stderr
from .common import OutputFormat, echo_json, fail, resolve_root


def _build_scope(
    file: Optional[Path], start_line: Optional[int], end_line: Optional[int]
) -> RenameScope:
    if (start_line is None) != (end_line is None):
        raise InputError("Both --start-line and --end-line must be provided together")
    if start_line is not None:
        if file is None:
            raise InputError("--file is required when using --start-line/--end-line")
        return RenameScope.lines(file.resolve(), start_line, end_line)
    if file is not None:
        return RenameScope.file(file.resolve())
    return RenameScope.project()


def _parse_lines(value: str, option: str) -> FrozenSet[int]:
    try:
        return frozenset(int(part) for part in value.split(",") if part.strip())
    except ValueError:
        raise InputError(
            f"{option} expects comma-separated line numbers, got '{value}'"
        ) from None


def _build_selection(
    include_lines: Optional[str], exclude_lines: Optional[str]
) -> Optional[LineSelection]:
    if include_lines is not None and exclude_lines is not None:
        raise InputError("--include-lines and --exclude-lines are mutually exclusive")
    if include_lines is not None:
        return LineSelection.including(_parse_lines(include_lines, "--include-lines"))
    if exclude_lines is not None:
        return LineSelection.excluding(_parse_lines(exclude_lines, "--exclude-lines"))
    return None


def _render_held_back(result: RenameResult, root: Path) -> None:
    if not result.held_back:
        return
    typer.echo("")
    typer.echo(nexus("rename.report.held_back", count=len(result.held_back)))
    for location in result.held_back:
        typer.echo(f"  {_relative(location.file, root)}:{location.line}")


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _render_text(result: RenameResult, root: Path) -> None:
    if not result.files:
        typer.echo(nexus("rename.report.none", old=result.old))
        _render_held_back(result, root)
        return

    header = "rename.report.header_dry_run" if result.dry_run else "rename.report.header"
    typer.echo(nexus(header, old=result.old, new=result.new))
    typer.echo(
        nexus(
            "rename.report.total",
            count=result.changed_locations,
            files=result.files_touched,
        )
    )
    typer.echo("")
    for line in result.details(root):
        typer.echo(f"  {line}")
    _render_held_back(result, root)


def rename_command(
    old: str = typer.Argument(..., help=nexus("cli.option.old.help")),
    new: str = typer.Argument(..., help=nexus("cli.option.new.help")),
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
    include_lines: Optional[str] = typer.Option(
        None, "--include-lines", help=nexus("cli.option.include_lines.help")
    ),
    exclude_lines: Optional[str] = typer.Option(
        None, "--exclude-lines", help=nexus("cli.option.exclude_lines.help")
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
        scope = _build_scope(file, start_line, end_line).with_selection(
            _build_selection(include_lines, exclude_lines)
        )
        app = CrossnameApp(root, use_config=not no_config)
        result = app.run_rename(
            old,
            new,
            scope=scope,
            dry_run=dry_run,
            git=git or None,
            git_commit=git_commit,
        )
    except RefactorError as e:
        fail(e)

    if output_format is OutputFormat.json:
        echo_json(result.to_dict(app.root_path))
    else:
        _render_text(result, app.root_path)

    if result.failures:
        raise typer.Exit(code=1)
