from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from crossname.common.transaction import read_source
from crossname.lang import CaptureRegistry
from crossname.spec import Capture, CaptureKind, Occurrence

# Inclusive, 1-based (start_line, end_line)
LineRange = Tuple[int, int]


@dataclass(frozen=True)
class LineSelection:
    """1-based line numbers that are either the only ones renamed or never renamed."""

    lines: FrozenSet[int]
    exclude: bool = False

    @classmethod
    def including(cls, lines: Iterable[int]) -> "LineSelection":
        return cls(lines=frozenset(lines))

    @classmethod
    def excluding(cls, lines: Iterable[int]) -> "LineSelection":
        return cls(lines=frozenset(lines), exclude=True)

    def accepts(self, line: int) -> bool:
        return (line in self.lines) != self.exclude


# Kinds that only say "this identifier is used here". Any other capture on
# the same token is more informative and replaces them.
_GENERIC_KINDS = {CaptureKind.REFERENCE}


class SymbolLocator:
    def __init__(
        self,
        registry: CaptureRegistry,
        read: Callable[[Path], str] = read_source,
    ):
        self.registry = registry
        self.read = read

    def find(
        self,
        path: Path,
        name: str,
        line_range: Optional[LineRange] = None,
        source: Optional[str] = None,
        selection: Optional[LineSelection] = None,
    ) -> List[Occurrence]:
        """
        Returns the renamable occurrences of `name` in `path`, in source order.

        Captures whose text is not exactly `name` are dropped (so `id` never
        matches inside `identifier`), as are string literal and comment
        captures. Several captures firing on the same token collapse into one
        occurrence.
        """
        if source is None:
            source = self.read(path)
        captures = self.registry.captures(path, source)
        return self.filter(captures, name, line_range, selection)

    def filter(
        self,
        captures: List[Capture],
        name: str,
        line_range: Optional[LineRange] = None,
        selection: Optional[LineSelection] = None,
    ) -> List[Occurrence]:
        by_position: Dict[Tuple[int, int], Occurrence] = {}
        for capture in captures:
            if capture.text != name or capture.kind.is_excluded:
                continue
            line = capture.location.line
            if line_range is not None and not (line_range[0] <= line <= line_range[1]):
                continue
            if selection is not None and not selection.accepts(line):
                continue

            key = (line, capture.location.column)
            existing = by_position.get(key)
            if existing is None or (
                existing.kind in _GENERIC_KINDS and capture.kind not in _GENERIC_KINDS
            ):
                by_position[key] = Occurrence.from_capture(capture)

        return [by_position[key] for key in sorted(by_position)]
