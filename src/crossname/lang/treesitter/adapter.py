"""
Normalizes the textual output of `tree-sitter query` into typed captures.

The CLI has printed its matches in several layouts over time. Each layout is a
`QueryDialect`; lines are matched by trial against every dialect, so output
mixing layouts (or carrying noise such as pattern headers) still parses.
Lines no dialect understands are skipped.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Sequence

from crossname.spec import Capture, CaptureKind, SourceLocation

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawCapture:
    name: str
    # 0-based, as printed by tree-sitter
    row: int
    col: int
    text: str


class QueryDialect:
    name: str = ""
    pattern: Pattern[str]

    def parse_line(self, line: str) -> Optional[RawCapture]:
        match = self.pattern.search(line)
        if not match:
            return None
        return RawCapture(
            name=match.group("name"),
            row=int(match.group("row")),
            col=int(match.group("col")),
            text=match.group("text"),
        )


class NumberedDialect(QueryDialect):
    """capture: 3 - symbol.reference, start: (4, 8), end: (4, 11), text: `foo`"""

    name = "numbered"
    pattern = re.compile(
        r"capture: \d+ - (?P<name>[a-z_.]+), start: \((?P<row>\d+), (?P<col>\d+)\)"
        r".* text: `(?P<text>[^`]*)`"
    )


class AtCaptureDialect(QueryDialect):
    """@symbol.reference (4, 8) - (4, 11) `foo`"""

    name = "at-capture"
    pattern = re.compile(
        r"@(?P<name>[a-z_.]+)\s+\((?P<row>\d+), (?P<col>\d+)\).*`(?P<text>[^`]+)`"
    )


class KeyValueDialect(QueryDialect):
    """capture: symbol.reference, text: "foo", row: 4, col: 8"""

    name = "key-value"
    pattern = re.compile(
        r'capture: (?P<name>[a-z_.]+), text: "(?P<text>[^"]*)", '
        r"row: (?P<row>\d+), col: (?P<col>\d+)"
    )


DEFAULT_DIALECTS: Sequence[QueryDialect] = (
    NumberedDialect(),
    AtCaptureDialect(),
    KeyValueDialect(),
)


def char_column(line: str, byte_column: int) -> int:
    """Converts a UTF-8 byte offset within `line` to a character offset."""
    return len(line.encode("utf-8")[:byte_column].decode("utf-8", errors="ignore"))


class QueryOutputAdapter:
    """
    Parses query output into captures whose columns are character offsets.

    tree-sitter reports byte columns. When the parsed `source` is given they
    are converted against its lines; without it they are kept as printed.
    """

    def __init__(self, dialects: Sequence[QueryDialect] = DEFAULT_DIALECTS):
        self.dialects = list(dialects)

    def parse_line(self, line: str) -> Optional[RawCapture]:
        for dialect in self.dialects:
            raw = dialect.parse_line(line)
            if raw is not None:
                return raw
        return None

    def parse(
        self, output: str, file_path: Path, source: Optional[str] = None
    ) -> List[Capture]:
        # tree-sitter rows advance on "\n" only.
        source_lines = source.split("\n") if source is not None else None
        captures: List[Capture] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            raw = self.parse_line(line)
            if raw is None:
                log.debug(f"Skipping unparsable query line: {line!r}")
                continue

            kind = CaptureKind.from_capture_name(raw.name)
            if kind is None:
                log.debug(f"Skipping unknown capture '{raw.name}' in {file_path}")
                continue

            column = raw.col
            if source_lines is not None and raw.row < len(source_lines):
                column = char_column(source_lines[raw.row], raw.col)

            location = SourceLocation(file=file_path, line=raw.row + 1, column=column)
            captures.append(Capture(kind=kind, location=location, text=raw.text))

        # Query matches are grouped by pattern, not by position.
        captures.sort(key=lambda c: (c.location.line, c.location.column))
        return captures
