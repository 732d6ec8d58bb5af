import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from crossname.spec import FileFailure

log = logging.getLogger(__name__)


@dataclass
class FileOp:
    path: Path

    def describe(self) -> str:
        raise NotImplementedError


@dataclass
class WriteFileOp(FileOp):
    content: str

    def describe(self) -> str:
        return f"[WRITE] {self.path}"


@dataclass
class CommitResult:
    written: List[Path] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)


def read_source(path: Path) -> str:
    # Bytes in, bytes out: line endings must survive a rewrite untouched.
    return path.read_bytes().decode("utf-8")


class TransactionManager:
    """
    Collects file writes and applies them as one unit.

    Reads go through `read_text`, which sees pending and (in dry-run mode)
    previously committed content before falling back to disk. A dry-run
    transaction therefore behaves exactly like a real one for every later
    reader, but never touches the filesystem.
    """

    def __init__(self, root_path: Path, dry_run: bool = False):
        self.root_path = root_path
        self.dry_run = dry_run
        self._ops: List[FileOp] = []
        self._view: Dict[Path, str] = {}

    @property
    def pending_count(self) -> int:
        return len(self._ops)

    def _abs(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root_path / path

    def read_text(self, path: Union[str, Path]) -> str:
        abs_path = self._abs(path)
        if abs_path in self._view:
            return self._view[abs_path]
        return read_source(abs_path)

    def add_write(self, path: Union[str, Path], content: str) -> None:
        abs_path = self._abs(path)
        try:
            rel_path = abs_path.relative_to(self.root_path)
        except ValueError:
            rel_path = abs_path
        self._ops.append(WriteFileOp(rel_path, content))
        self._view[abs_path] = content

    def pending_paths(self) -> List[Path]:
        return [self._abs(op.path) for op in self._ops]

    def preview(self) -> List[str]:
        return [op.describe() for op in self._ops]

    def commit(self) -> CommitResult:
        result = CommitResult()
        ops, self._ops = self._ops, []

        for op in ops:
            abs_path = self._abs(op.path)
            if self.dry_run:
                result.written.append(abs_path)
                continue

            if isinstance(op, WriteFileOp):
                try:
                    if not abs_path.exists():
                        raise FileNotFoundError(f"File disappeared before write: {op.path}")
                    abs_path.write_bytes(op.content.encode("utf-8"))
                    result.written.append(abs_path)
                except OSError as e:
                    log.warning(f"Could not write {abs_path}: {e}")
                    result.failures.append(FileFailure(path=abs_path, reason=str(e)))
                # Disk is the source of truth again once a real write was attempted.
                self._view.pop(abs_path, None)

        return result
