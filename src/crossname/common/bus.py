import os
from pathlib import Path
from typing import Any

from .messaging import MessageBus, MessageStore


def _detect_lang() -> str:
    # 1. Explicit override
    env_lang = os.getenv("CROSSNAME_LANG")
    if env_lang:
        return env_lang

    # 2. System LANG (e.g. "en_US.UTF-8" -> "en")
    sys_lang = os.getenv("LANG")
    if sys_lang:
        base_lang = sys_lang.split(".")[0].split("_")[0]
        if base_lang:
            return base_lang

    return "en"


_assets_root = Path(__file__).parent / "assets"
_store = MessageStore(_assets_root, lang=_detect_lang())

# Global feedback bus. The CLI installs a renderer; library use stays silent.
bus = MessageBus(store=_store)


def crossname_operator(msg_id: str, **kwargs: Any) -> str:
    """Resolves a message id to its final string without going through a renderer."""
    return bus.render_to_string(msg_id, **kwargs)


__all__ = ["bus", "crossname_operator"]
