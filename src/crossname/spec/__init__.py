from .models import (
    CaptureKind,
    ReferenceRole,
    SourceLocation,
    Capture,
    Occurrence,
    RenameMapping,
    ExecutionStep,
    Cycle,
    AmbiguousDependency,
    RenamePlan,
    FileFailure,
)
from .protocols import CaptureSourceProtocol, BackupServiceProtocol, VcsProtocol

__all__ = [
    "CaptureKind",
    "ReferenceRole",
    "SourceLocation",
    "Capture",
    "Occurrence",
    "RenameMapping",
    "ExecutionStep",
    "Cycle",
    "AmbiguousDependency",
    "RenamePlan",
    "FileFailure",
    "CaptureSourceProtocol",
    "BackupServiceProtocol",
    "VcsProtocol",
]
