import json
import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)

BACKENDS = ("auto", "tree-sitter", "libcst")


@dataclass
class RefactorConfig:
    exclude: List[str] = field(default_factory=list)
    backup: bool = True
    git_integration: bool = False
    languages: List[str] = field(default_factory=list)
    extensions: Dict[str, List[str]] = field(default_factory=dict)
    backend: str = "auto"
    tree_sitter_bin: str = "tree-sitter"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RefactorConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            attr = key.replace("-", "_")
            if attr in known:
                kwargs[attr] = value
            else:
                log.warning(f"Ignoring unknown config key: {key}")

        config = cls(**kwargs)
        if config.backend not in BACKENDS:
            log.warning(
                f"Unknown backend '{config.backend}', expected one of {BACKENDS}; using 'auto'"
            )
            config.backend = "auto"
        return config


def _load_pyproject(root_path: Path) -> Optional[Dict[str, Any]]:
    config_path = root_path / "pyproject.toml"
    if not config_path.is_file():
        return None
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning(f"Could not process {config_path}: {e}")
        return None
    return data.get("tool", {}).get("crossname")


def _load_refactorrc(root_path: Path) -> Optional[Dict[str, Any]]:
    config_path = root_path / ".refactorrc"
    if not config_path.is_file():
        return None
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.warning(f"Could not process {config_path}: {e}")
        return None
    if not isinstance(data, dict):
        log.warning(f"Ignoring {config_path}: expected a JSON object")
        return None
    return data


def load_config_from_path(root_path: Path) -> RefactorConfig:
    """
    Loads the project configuration.

    `[tool.crossname]` in pyproject.toml wins; a JSON `.refactorrc` is read only
    when pyproject.toml carries no such table. Broken files fall back to defaults.
    """
    for loader in (_load_pyproject, _load_refactorrc):
        data = loader(root_path)
        if data is not None:
            return RefactorConfig.from_dict(data)
    return RefactorConfig()
