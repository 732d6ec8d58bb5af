from .base import AbstractOperation
from .rename_symbol import (
    FileChange,
    RenameResult,
    RenameScope,
    RenameSymbolOperation,
)
from .rename_case import RenameCaseOperation
from .batch_rename import (
    BatchRenameOperation,
    BatchReport,
    MappingResult,
    ResolutionWarning,
)

__all__ = [
    "AbstractOperation",
    "FileChange",
    "RenameResult",
    "RenameScope",
    "RenameSymbolOperation",
    "RenameCaseOperation",
    "BatchRenameOperation",
    "BatchReport",
    "MappingResult",
    "ResolutionWarning",
]
