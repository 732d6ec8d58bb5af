import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

from crossname.config import RefactorConfig
from crossname.spec import Capture, CaptureSourceProtocol
from .languages import LanguageMap
from .python import LibCSTCaptureSource
from .treesitter import TreeSitterCaptureSource

log = logging.getLogger(__name__)


class CaptureRegistry:
    """
    Picks the capture source for each file.

    backend "auto" uses libcst for Python and tree-sitter for everything else;
    "libcst" restricts the engine to Python; "tree-sitter" uses the external
    CLI for every language.
    """

    def __init__(
        self,
        language_map: Optional[LanguageMap] = None,
        backend: str = "auto",
        sources: Optional[Dict[str, CaptureSourceProtocol]] = None,
        tree_sitter: Optional[TreeSitterCaptureSource] = None,
    ):
        self.language_map = language_map or LanguageMap()
        self.backend = backend
        self.tree_sitter = tree_sitter or TreeSitterCaptureSource()
        self._sources: Dict[str, CaptureSourceProtocol] = dict(sources or {})
        if "python" not in self._sources and backend != "tree-sitter":
            self._sources["python"] = LibCSTCaptureSource()
        self._warned: Set[str] = set()

    @classmethod
    def from_config(cls, config: RefactorConfig) -> "CaptureRegistry":
        return cls(
            language_map=LanguageMap(config.extensions, config.languages),
            backend=config.backend,
            tree_sitter=TreeSitterCaptureSource(binary=config.tree_sitter_bin),
        )

    def source_for(self, language: str) -> Optional[CaptureSourceProtocol]:
        if language in self._sources:
            return self._sources[language]
        if self.backend == "libcst":
            return None
        if not self.tree_sitter.is_available():
            if language not in self._warned:
                self._warned.add(language)
                log.warning(
                    f"'{self.tree_sitter.binary}' not found; {language} files are skipped"
                )
            return None
        return self.tree_sitter

    def language_of(self, path: Path) -> Optional[str]:
        return self.language_map.detect(path)

    def supports(self, path: Path) -> bool:
        language = self.language_of(path)
        return language is not None and self.source_for(language) is not None

    def captures(self, path: Path, source: str) -> List[Capture]:
        language = self.language_of(path)
        if language is None:
            return []
        capture_source = self.source_for(language)
        if capture_source is None:
            return []
        return capture_source.captures(path, language, source)
