from typing import Any, Optional

from .protocols import Renderer
from .store import MessageStore

LEVELS = ("debug", "info", "success", "warning", "error")


class MessageBus:
    """
    Routes user-facing feedback to the active renderer.

    Business logic only ever talks to the bus with message ids; how (and whether)
    a message is shown is decided by the renderer installed by the CLI. A bus
    without a renderer is silent.
    """

    def __init__(self, store: MessageStore):
        self._store = store
        self._renderer: Optional[Renderer] = None

    @property
    def renderer(self) -> Optional[Renderer]:
        return self._renderer

    def set_renderer(self, renderer: Optional[Renderer]) -> None:
        self._renderer = renderer

    def set_store(self, store: MessageStore) -> None:
        self._store = store

    def render_to_string(self, msg_id: str, **kwargs: Any) -> str:
        return self._store.get(msg_id, **kwargs)

    def _render(self, level: str, msg_id: str, **kwargs: Any) -> None:
        if not self._renderer:
            return
        self._renderer.render(self._store.get(msg_id, **kwargs), level)

    def debug(self, msg_id: str, **kwargs: Any) -> None:
        self._render("debug", msg_id, **kwargs)

    def info(self, msg_id: str, **kwargs: Any) -> None:
        self._render("info", msg_id, **kwargs)

    def success(self, msg_id: str, **kwargs: Any) -> None:
        self._render("success", msg_id, **kwargs)

    def warning(self, msg_id: str, **kwargs: Any) -> None:
        self._render("warning", msg_id, **kwargs)

    def error(self, msg_id: str, **kwargs: Any) -> None:
        self._render("error", msg_id, **kwargs)
