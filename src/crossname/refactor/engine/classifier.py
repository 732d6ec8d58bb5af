import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from crossname.spec import CaptureKind, Occurrence, ReferenceRole, SourceLocation
from crossname.refactor.workspace import Workspace
from .locator import SymbolLocator

log = logging.getLogger(__name__)

_ROLE_BY_KIND = {
    CaptureKind.DEFINITION: ReferenceRole.DEFINITION,
    CaptureKind.REFERENCE: ReferenceRole.REFERENCE,
    CaptureKind.TYPE_REFERENCE: ReferenceRole.REFERENCE,
    CaptureKind.IMPORT: ReferenceRole.IMPORT,
    CaptureKind.EXPORT: ReferenceRole.EXPORT,
    CaptureKind.PARAMETER: ReferenceRole.PARAMETER,
}


def classify(kind: CaptureKind) -> ReferenceRole:
    """Reporting role of a capture kind. Never used to decide what gets renamed."""
    try:
        return _ROLE_BY_KIND[kind]
    except KeyError:
        raise ValueError(f"{kind.value} captures have no reference role") from None


@dataclass
class ReferenceReport:
    symbol: str
    by_role: Dict[ReferenceRole, List[SourceLocation]] = field(
        default_factory=lambda: {role: [] for role in ReferenceRole}
    )

    def add(self, occurrence: Occurrence) -> None:
        self.by_role[classify(occurrence.kind)].append(occurrence.location)

    @property
    def total(self) -> int:
        return sum(len(locations) for locations in self.by_role.values())

    def entries(self, role: ReferenceRole, root: Optional[Path] = None) -> List[str]:
        return [_format_location(loc, root) for loc in self.by_role[role]]

    def to_dict(self, root: Optional[Path] = None) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "total": self.total,
            "definitions": self.entries(ReferenceRole.DEFINITION, root),
            "references": self.entries(ReferenceRole.REFERENCE, root),
            "imports": self.entries(ReferenceRole.IMPORT, root),
            "exports": self.entries(ReferenceRole.EXPORT, root),
            "parameters": self.entries(ReferenceRole.PARAMETER, root),
        }


def _format_location(location: SourceLocation, root: Optional[Path]) -> str:
    path = location.file
    if root is not None:
        try:
            path = path.relative_to(root)
        except ValueError:
            pass
    return f"{path.as_posix()}:{location.line}:{location.column + 1}"


class ReferenceFinder:
    def __init__(self, workspace: Workspace, locator: SymbolLocator):
        self.workspace = workspace
        self.locator = locator

    def find(self, name: str) -> ReferenceReport:
        report = ReferenceReport(symbol=name)
        for path in self.workspace.find_candidates(name, read=self.locator.read):
            try:
                occurrences = self.locator.find(path, name)
            except (OSError, UnicodeDecodeError) as e:
                log.warning(f"Could not read {path}: {e}")
                continue
            for occurrence in occurrences:
                report.add(occurrence)
        return report
