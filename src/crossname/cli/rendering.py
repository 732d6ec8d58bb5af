import typer

from crossname.common import bus
from crossname.common.messaging import protocols

LEVEL_ORDER = {"debug": 0, "info": 1, "success": 2, "warning": 3, "error": 4}


class CliRenderer(protocols.Renderer):
    """
    Renders messages to the command line using Typer for colored output.

    Messages below `loglevel` are dropped. With `err=True` everything goes to
    stderr, which keeps stdout clean for machine-readable reports.
    """

    def __init__(self, loglevel: str = "info", err: bool = False):
        self.threshold = LEVEL_ORDER.get(loglevel, LEVEL_ORDER["info"])
        self.err = err

    def render(self, message: str, level: str) -> None:
        if LEVEL_ORDER.get(level, LEVEL_ORDER["info"]) < self.threshold:
            return

        color = None
        if level == "success":
            color = typer.colors.GREEN
        elif level == "warning":
            color = typer.colors.YELLOW
        elif level == "error":
            color = typer.colors.RED
        elif level == "debug":
            color = typer.colors.BRIGHT_BLACK

        typer.secho(message, fg=color, err=self.err)


def route_messages_to_stderr() -> None:
    renderer = bus.renderer
    if isinstance(renderer, CliRenderer):
        renderer.err = True
