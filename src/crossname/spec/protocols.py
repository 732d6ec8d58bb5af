from pathlib import Path
from typing import Protocol, List, Optional, Sequence

from .models import Capture


class CaptureSourceProtocol(Protocol):
    """
    Produces the typed captures of a single source file.
    """

    def captures(self, path: Path, language: str, source: str) -> List[Capture]:
        """
        Return every capture of the file in source order.

        Args:
            path: The file the captures are reported against.
            language: The language key the file was detected as (e.g. "python").
            source: The current content of the file. It may differ from what is
                    on disk while a dry-run transaction is in flight.

        Returns:
            An empty list when the file cannot be analysed; a source never raises
            for a single unparsable file.
        """
        ...


class BackupServiceProtocol(Protocol):
    def snapshot(self, operation: str, paths: Sequence[Path]) -> Optional[str]:
        """
        Save the current content of `paths` before they are overwritten.
        Returns an identifier that can later be restored, or None if nothing was saved.
        """
        ...


class VcsProtocol(Protocol):
    def is_dirty(self) -> bool: ...

    def stage(self, paths: Sequence[Path]) -> bool: ...

    def commit(self, message: str) -> bool: ...
