from .context import RefactorContext
from .locator import SymbolLocator, LineRange, LineSelection
from .classifier import ReferenceFinder, ReferenceReport, classify
from .graph import RenameGraphBuilder
from .planner import BatchPlanner, TEMP_PREFIX

__all__ = [
    "RefactorContext",
    "SymbolLocator",
    "LineRange",
    "LineSelection",
    "ReferenceFinder",
    "ReferenceReport",
    "classify",
    "RenameGraphBuilder",
    "BatchPlanner",
    "TEMP_PREFIX",
]
