import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from crossname.spec import Occurrence

log = logging.getLogger(__name__)

_LINE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")


def split_lines(source: str) -> List[str]:
    """Splits into lines, each keeping its own terminator."""
    return _LINE.findall(source)


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


@dataclass
class LineEdit:
    line: int
    before: str
    after: str


@dataclass
class RewriteResult:
    source: str
    applied: List[Occurrence] = field(default_factory=list)
    dropped: List[Occurrence] = field(default_factory=list)
    edits: List[LineEdit] = field(default_factory=list)


class OccurrenceRewriter:
    """
    Replaces `old` with `new` at exactly the given occurrence positions.

    It does NOT search for the name; it trusts the occurrences and only checks
    that each one still spells `old` as a whole word. Columns are character
    offsets; capture sources convert anything else before this point. Every
    other character of the source, line terminators included, is preserved.
    """

    def __init__(self, old: str, new: str):
        self.old = old
        self.new = new

    def _resolve_column(self, text: str, column: int) -> Optional[int]:
        end = column + len(self.old)
        if text[column:end] == self.old and self._is_whole_word(text, column, end):
            return column
        return None

    def _is_whole_word(self, text: str, start: int, end: int) -> bool:
        if start > 0 and _is_ident_char(text[start - 1]):
            return False
        if end < len(text) and _is_ident_char(text[end]):
            return False
        return True

    def rewrite(self, source: str, occurrences: List[Occurrence]) -> RewriteResult:
        lines = split_lines(source)
        result = RewriteResult(source=source)

        columns_by_line: Dict[int, List[int]] = {}
        for occurrence in occurrences:
            index = occurrence.line - 1
            if not 0 <= index < len(lines):
                log.warning(f"Occurrence outside of file, ignored: {occurrence.location}")
                result.dropped.append(occurrence)
                continue
            body = lines[index].rstrip("\r\n")
            column = self._resolve_column(body, occurrence.column)
            if column is None:
                log.warning(
                    f"'{self.old}' not found at {occurrence.location}, occurrence ignored"
                )
                result.dropped.append(occurrence)
                continue
            columns = columns_by_line.setdefault(index, [])
            if column not in columns:
                columns.append(column)
                result.applied.append(occurrence)

        for index in sorted(columns_by_line):
            line = lines[index]
            body = line.rstrip("\r\n")
            ending = line[len(body) :]
            updated = body
            # Right to left, so earlier columns stay valid.
            for column in sorted(columns_by_line[index], reverse=True):
                updated = updated[:column] + self.new + updated[column + len(self.old) :]
            lines[index] = updated + ending
            result.edits.append(LineEdit(line=index + 1, before=body, after=updated))

        result.source = "".join(lines)
        return result
