from pathlib import Path
from typing import Dict, Iterable, List, Optional

DEFAULT_EXTENSIONS: Dict[str, List[str]] = {
    # JavaScript is parsed with the TypeScript grammar.
    "typescript": ["ts", "tsx", "js", "jsx", "mjs", "cjs"],
    "python": ["py"],
    "java": ["java"],
    "kotlin": ["kt", "kts"],
}


class LanguageMap:
    """Maps file extensions to language keys."""

    def __init__(
        self,
        extra_extensions: Optional[Dict[str, List[str]]] = None,
        languages: Optional[Iterable[str]] = None,
    ):
        merged: Dict[str, List[str]] = {k: list(v) for k, v in DEFAULT_EXTENSIONS.items()}
        for lang, exts in (extra_extensions or {}).items():
            merged.setdefault(lang, [])
            for ext in exts:
                ext = ext.lstrip(".")
                if ext not in merged[lang]:
                    merged[lang].append(ext)

        allowed = set(languages) if languages else None
        self._by_ext: Dict[str, str] = {}
        for lang, exts in merged.items():
            if allowed is not None and lang not in allowed:
                continue
            for ext in exts:
                self._by_ext[ext] = lang

    def detect(self, path: Path) -> Optional[str]:
        return self._by_ext.get(path.suffix.lstrip("."))

    @property
    def extensions(self) -> List[str]:
        return sorted(self._by_ext)


def detect_language(path: Path) -> Optional[str]:
    return LanguageMap().detect(path)
