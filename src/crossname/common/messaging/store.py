import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)


class MessageStore:
    """
    Resolves message ids (e.g. "rename.run.complete") to formatted strings.

    Templates live in JSON files under `<assets_root>/<lang>/`. Nested objects
    are flattened into dotted ids, so {"rename": {"run": {"complete": "..."}}}
    and {"rename.run.complete": "..."} are equivalent.
    """

    def __init__(self, assets_root: Path, lang: str = "en", fallback_lang: str = "en"):
        self._templates: Dict[str, str] = {}
        self._load_lang(assets_root / fallback_lang)
        if lang != fallback_lang:
            self._load_lang(assets_root / lang)

    @classmethod
    def from_dict(cls, templates: Dict[str, Any]) -> "MessageStore":
        store = cls.__new__(cls)
        store._templates = {}
        store._merge(templates)
        return store

    def _load_lang(self, lang_dir: Path) -> None:
        if not lang_dir.is_dir():
            return
        for asset in sorted(lang_dir.glob("*.json")):
            try:
                self._merge(json.loads(asset.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                log.warning(f"Could not load message asset {asset}: {e}")

    def _merge(self, data: Dict[str, Any], prefix: str = "") -> None:
        for key, value in data.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict):
                self._merge(value, prefix=f"{full_key}.")
            else:
                self._templates[full_key] = str(value)

    def template(self, msg_id: str) -> Optional[str]:
        return self._templates.get(msg_id)

    def get(self, msg_id: str, **kwargs: Any) -> str:
        template = self._templates.get(msg_id)
        if template is None:
            # Identity fallback: an unknown id renders as itself.
            return msg_id
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError) as e:
            log.debug(f"Missing parameter {e} for message '{msg_id}'")
            return template
