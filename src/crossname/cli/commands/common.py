import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, NoReturn

import typer

from crossname.common import bus


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def resolve_root(path: Path) -> Path:
    root = path.resolve()
    if not root.exists():
        bus.error("error.generic", error=f"Path not found: {path}")
        raise typer.Exit(code=1)
    return root


def echo_json(data: Dict[str, Any]) -> None:
    typer.echo(json.dumps(data, indent=2))


def fail(error: Exception) -> NoReturn:
    bus.error("error.generic", error=str(error))
    raise typer.Exit(code=1)
