from pathlib import Path
from typing import Optional

import typer

from crossname.app import CrossnameApp
from crossname.common import bus, crossname_operator as nexus
from crossname.refactor.exceptions import RefactorError
from .common import fail, resolve_root


def undo_command(
    list_: bool = typer.Option(False, "--list", help=nexus("cli.option.list.help")),
    last: bool = typer.Option(False, "--last", help=nexus("cli.option.last.help")),
    backup_id: Optional[str] = typer.Option(None, "--id", help=nexus("cli.option.id.help")),
    clean: bool = typer.Option(False, "--clean", help=nexus("cli.option.clean.help")),
    days: int = typer.Option(7, "--days", min=0, help=nexus("cli.option.days.help")),
    path: Path = typer.Option(Path("."), "--path", "-p", help=nexus("cli.option.path.help")),
):
    chosen = [list_, last, backup_id is not None, clean]
    if sum(chosen) != 1:
        bus.error("error.undo.conflicting_options")
        raise typer.Exit(code=1)

    root = resolve_root(path)
    app = CrossnameApp(root, use_config=False)
    try:
        if list_:
            records = app.list_backups()
            if not records:
                typer.echo(nexus("backup.list.empty"))
                return
            typer.echo(nexus("backup.list.header"))
            for record in reversed(records):
                typer.echo(
                    nexus(
                        "backup.list.entry",
                        id=record.id,
                        timestamp=record.timestamp,
                        operation=record.operation,
                        count=len(record.files),
                    )
                )
        elif clean:
            app.run_clean(days=days)
        else:
            app.run_undo(backup_id)
    except RefactorError as e:
        fail(e)
