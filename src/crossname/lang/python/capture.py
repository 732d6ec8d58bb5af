import logging
import re
from pathlib import Path
from typing import Dict, List, Union

import libcst as cst
from libcst.metadata import PositionProvider

from crossname.spec import Capture, CaptureKind, SourceLocation

log = logging.getLogger(__name__)

_WORD = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _names_in(node: cst.BaseExpression) -> List[cst.Name]:
    if isinstance(node, cst.Name):
        return [node]
    if isinstance(node, cst.Attribute):
        return _names_in(node.value) + [node.attr]
    return []


class _CaptureVisitor(cst.CSTVisitor):
    """
    Emits one capture per identifier token, plus excluded captures for every
    identifier-shaped word inside strings and comments.

    Parent nodes "claim" their child Name with a specific kind before the child
    is visited; unclaimed names are plain references.
    """

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self.captures: List[Capture] = []
        self._claims: Dict[int, CaptureKind] = {}
        self._annotation_depth = 0

    def _claim(self, node: cst.CSTNode, kind: CaptureKind) -> None:
        if isinstance(node, cst.Name):
            self._claims.setdefault(id(node), kind)

    def _emit(self, kind: CaptureKind, line: int, column: int, text: str) -> None:
        location = SourceLocation(file=self.file_path, line=line, column=column)
        self.captures.append(Capture(kind=kind, location=location, text=text))

    def _emit_words(self, node: cst.CSTNode, raw: str, kind: CaptureKind) -> None:
        pos = self.get_metadata(PositionProvider, node)
        for match in _WORD.finditer(raw):
            preceding = raw[: match.start()]
            newlines = preceding.count("\n")
            if newlines:
                column = match.start() - (preceding.rfind("\n") + 1)
            else:
                column = pos.start.column + match.start()
            self._emit(kind, pos.start.line + newlines, column, match.group())

    # --- Definitions ---

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self._claim(node.name, CaptureKind.DEFINITION)
        return True

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self._claim(node.name, CaptureKind.DEFINITION)
        return True

    def visit_AssignTarget(self, node: cst.AssignTarget) -> bool:
        self._claim(node.target, CaptureKind.DEFINITION)
        return True

    def visit_AnnAssign(self, node: cst.AnnAssign) -> bool:
        self._claim(node.target, CaptureKind.DEFINITION)
        return True

    def visit_Param(self, node: cst.Param) -> bool:
        self._claim(node.name, CaptureKind.PARAMETER)
        return True

    # --- Imports ---

    def _claim_alias(self, alias: cst.ImportAlias) -> None:
        for name in _names_in(alias.name):
            self._claim(name, CaptureKind.IMPORT)
        if alias.asname and isinstance(alias.asname.name, cst.Name):
            self._claim(alias.asname.name, CaptureKind.IMPORT)

    def visit_Import(self, node: cst.Import) -> bool:
        for alias in node.names:
            self._claim_alias(alias)
        return True

    def visit_ImportFrom(self, node: cst.ImportFrom) -> bool:
        if node.module is not None:
            for name in _names_in(node.module):
                self._claim(name, CaptureKind.IMPORT)
        if not isinstance(node.names, cst.ImportStar):
            for alias in node.names:
                self._claim_alias(alias)
        return True

    # --- Annotations ---

    def visit_Annotation(self, node: cst.Annotation) -> bool:
        self._annotation_depth += 1
        return True

    def leave_Annotation(self, original_node: cst.Annotation) -> None:
        self._annotation_depth -= 1

    # --- Identifiers ---

    def visit_Name(self, node: cst.Name) -> bool:
        default = (
            CaptureKind.TYPE_REFERENCE
            if self._annotation_depth
            else CaptureKind.REFERENCE
        )
        kind = self._claims.pop(id(node), default)
        pos = self.get_metadata(PositionProvider, node)
        self._emit(kind, pos.start.line, pos.start.column, node.value)
        return False

    # --- Excluded text ---

    def visit_SimpleString(self, node: cst.SimpleString) -> bool:
        self._emit_words(node, node.value, CaptureKind.STRING_LITERAL)
        return False

    def visit_FormattedStringText(self, node: cst.FormattedStringText) -> bool:
        self._emit_words(node, node.value, CaptureKind.STRING_LITERAL)
        return False

    def visit_Comment(self, node: cst.Comment) -> bool:
        self._emit_words(node, node.value, CaptureKind.COMMENT)
        return False


class LibCSTCaptureSource:
    """Native capture source for Python files."""

    def captures(self, path: Path, language: str, source: str) -> List[Capture]:
        try:
            wrapper = cst.MetadataWrapper(cst.parse_module(source))
        except cst.ParserSyntaxError as e:
            log.warning(f"Could not parse {path}: {e}")
            return []

        visitor = _CaptureVisitor(path)
        wrapper.visit(visitor)
        return sorted(
            visitor.captures, key=lambda c: (c.location.line, c.location.column)
        )


def capture_python_source(source: str, path: Union[str, Path] = "<memory>") -> List[Capture]:
    return LibCSTCaptureSource().captures(Path(path), "python", source)
