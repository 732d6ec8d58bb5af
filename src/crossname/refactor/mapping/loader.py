import json
from pathlib import Path
from typing import Any, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from crossname.refactor.exceptions import MappingFileError
from crossname.spec import RenameMapping

YAML_SUFFIXES = {".yaml", ".yml"}


class MappingLoader:
    """
    Reads a rename mapping set from JSON or YAML.

    Expected shape: {"renames": [{"old": "...", "new": "..."}, ...]}. As a
    shorthand, "renames" may also be a plain {old: new} table.
    """

    def load_from_path(self, path: Path) -> List[RenameMapping]:
        if not path.is_file():
            raise MappingFileError(f"Mapping file not found: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MappingFileError(f"Could not read mapping file {path}: {e}") from e
        return self.load_from_string(content, is_yaml=path.suffix.lower() in YAML_SUFFIXES)

    def load_from_string(self, content: str, is_yaml: bool = False) -> List[RenameMapping]:
        try:
            data = YAML(typ="safe").load(content) if is_yaml else json.loads(content)
        except (YAMLError, json.JSONDecodeError) as e:
            raise MappingFileError(f"Malformed mapping file: {e}") from e
        return self.parse(data)

    def parse(self, data: Any) -> List[RenameMapping]:
        if not isinstance(data, dict) or "renames" not in data:
            raise MappingFileError("Mapping file must contain a top-level 'renames' entry")

        renames = data["renames"]
        if renames is None:
            return []
        if isinstance(renames, dict):
            renames = [{"old": old, "new": new} for old, new in renames.items()]
        if not isinstance(renames, list):
            raise MappingFileError("'renames' must be a list of {old, new} entries")

        mappings: List[RenameMapping] = []
        for index, entry in enumerate(renames):
            if not isinstance(entry, dict):
                raise MappingFileError(f"renames[{index}] is not an object")
            old, new = entry.get("old"), entry.get("new")
            for field_name, value in (("old", old), ("new", new)):
                if not isinstance(value, str) or not value.strip():
                    raise MappingFileError(
                        f"renames[{index}].{field_name} must be a non-empty string"
                    )
            mappings.append(RenameMapping(old=old, new=new))
        return mappings
