import fnmatch
import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

from crossname.common.transaction import read_source
from crossname.lang import LanguageMap

log = logging.getLogger(__name__)

# Common directories and artifacts that never hold renamable sources.
EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    ".idea",
    ".vscode",
    "build",
    "dist",
    "node_modules",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    "__pycache__",
    "site-packages",
    ".refactor-backup",
}


class Workspace:
    def __init__(
        self,
        root_path: Path,
        language_map: Optional[LanguageMap] = None,
        exclude: Sequence[str] = (),
    ):
        self.root_path = root_path
        self.language_map = language_map or LanguageMap()
        self.exclude = list(exclude)

    def _is_excluded(self, path: Path) -> bool:
        try:
            rel = path.relative_to(self.root_path).as_posix()
        except ValueError:
            rel = path.as_posix()
        return any(
            fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(path.name, pattern)
            for pattern in self.exclude
        )

    def iter_source_files(self) -> Iterator[Path]:
        """Yields every file of a supported language, in a stable order."""
        if self.root_path.is_file():
            if self.language_map.detect(self.root_path):
                yield self.root_path
            return

        for dirpath, dirnames, filenames in os.walk(self.root_path):
            dirnames[:] = sorted(
                d
                for d in dirnames
                if d not in EXCLUDED_DIRS and not d.endswith(".egg-info")
            )
            current = Path(dirpath)
            for name in sorted(filenames):
                path = current / name
                if self.language_map.detect(path) is None:
                    continue
                if self._is_excluded(path):
                    continue
                yield path

    def find_candidates(
        self, text: str, read: Callable[[Path], str] = read_source
    ) -> List[Path]:
        """
        Cheap pre-filter: files whose content contains `text` as a substring.

        A hit only means the text appears somewhere, possibly inside a string or
        comment; callers must confirm every hit with real captures.
        """
        candidates: List[Path] = []
        for path in self.iter_source_files():
            try:
                content = read(path)
            except UnicodeDecodeError as e:
                log.debug(f"Skipping non UTF-8 file {path}: {e}")
                continue
            except OSError:
                # Let the executor record the failure against this file.
                candidates.append(path)
                continue
            if text in content:
                candidates.append(path)
        return candidates
