import logging
from enum import Enum

import typer

from crossname.common import bus, crossname_operator as nexus
from .rendering import CliRenderer
from .commands.batch import batch_command
from .commands.refs import refs_command
from .commands.rename import rename_command
from .commands.rename_case import rename_case_command
from .commands.undo import undo_command

app = typer.Typer(
    name="crossname",
    help=nexus("cli.app.help"),
    no_args_is_help=True,
)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


_LOGGING_LEVELS = {
    LogLevel.debug: logging.DEBUG,
    LogLevel.info: logging.INFO,
    LogLevel.success: logging.INFO,
    LogLevel.warning: logging.WARNING,
    LogLevel.error: logging.ERROR,
}


@app.callback()
def main(
    loglevel: LogLevel = typer.Option(
        LogLevel.info,
        "--loglevel",
        case_sensitive=False,
        help=nexus("cli.option.loglevel.help"),
    ),
):
    level = _LOGGING_LEVELS[loglevel]
    if level > logging.DEBUG:
        # INFO diagnostics only show with --loglevel debug; the bus covers the rest.
        level = max(level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    bus.set_renderer(CliRenderer(loglevel=loglevel.value))


app.command(name="rename", help=nexus("cli.command.rename.help"))(rename_command)
app.command(name="rename-case", help=nexus("cli.command.rename_case.help"))(
    rename_case_command
)
app.command(name="batch", help=nexus("cli.command.batch.help"))(batch_command)
app.command(name="refs", help=nexus("cli.command.refs.help"))(refs_command)
app.command(name="undo", help=nexus("cli.command.undo.help"))(undo_command)


if __name__ == "__main__":
    app()
