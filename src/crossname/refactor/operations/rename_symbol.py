import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from crossname.common import bus
from crossname.common.transaction import TransactionManager
from crossname.refactor.engine.context import RefactorContext
from crossname.refactor.engine.locator import LineRange, LineSelection
from crossname.refactor.exceptions import InputError
from crossname.spec import FileFailure, Occurrence, SourceLocation
from .base import AbstractOperation
from .transforms import LineEdit, OccurrenceRewriter

log = logging.getLogger(__name__)

SCOPE_PROJECT = "project"
SCOPE_FILE = "file"
SCOPE_LINES = "lines"


@dataclass(frozen=True)
class RenameScope:
    kind: str = SCOPE_PROJECT
    path: Optional[Path] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    selection: Optional[LineSelection] = None

    @classmethod
    def project(cls) -> "RenameScope":
        return cls()

    @classmethod
    def file(cls, path: Path) -> "RenameScope":
        return cls(kind=SCOPE_FILE, path=path)

    @classmethod
    def lines(cls, path: Path, start_line: int, end_line: int) -> "RenameScope":
        return cls(kind=SCOPE_LINES, path=path, start_line=start_line, end_line=end_line)

    def with_selection(self, selection: Optional[LineSelection]) -> "RenameScope":
        return replace(self, selection=selection)

    @property
    def line_range(self) -> Optional[LineRange]:
        if self.kind != SCOPE_LINES:
            return None
        return (self.start_line, self.end_line)

    def validate(self) -> None:
        if self.selection is not None:
            if not self.selection.lines:
                raise InputError("A line selection needs at least one line")
            if min(self.selection.lines) < 1:
                raise InputError("Selected lines are 1-based")
        if self.kind == SCOPE_PROJECT:
            return
        if self.kind not in (SCOPE_FILE, SCOPE_LINES):
            raise InputError(f"Unknown rename scope: {self.kind}")
        if self.path is None or not self.path.is_file():
            raise InputError(f"File not found: {self.path}")
        if self.kind == SCOPE_LINES:
            if self.start_line is None or self.end_line is None:
                raise InputError("A line scope needs both a start and an end line")
            if not 1 <= self.start_line <= self.end_line:
                raise InputError(
                    f"Invalid line range {self.start_line}-{self.end_line}: "
                    "lines are 1-based and start must not exceed end"
                )


@dataclass
class FileChange:
    path: Path
    occurrences: List[Occurrence] = field(default_factory=list)
    edits: List[LineEdit] = field(default_factory=list)

    @property
    def changes(self) -> int:
        return len(self.occurrences)


@dataclass
class RenameResult:
    old: str
    new: str
    dry_run: bool = False
    files: List[FileChange] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    # Occurrences left alone because the line selection rejected them
    held_back: List[SourceLocation] = field(default_factory=list)
    backup_id: Optional[str] = None

    @property
    def changed_locations(self) -> int:
        return sum(change.changes for change in self.files)

    @property
    def files_touched(self) -> int:
        return len(self.files)

    def details(self, root: Optional[Path] = None) -> List[str]:
        lines: List[str] = []
        for change in self.files:
            display = _display_path(change.path, root)
            for edit in change.edits:
                if self.dry_run:
                    lines.append(
                        f"{display}:{edit.line}: {edit.before.strip()} -> {edit.after.strip()}"
                    )
                else:
                    lines.append(f"{display}:{edit.line}")
        return lines

    def to_dict(self, root: Optional[Path] = None) -> Dict[str, Any]:
        return {
            "symbol": self.old,
            "newName": self.new,
            "totalChanges": self.changed_locations,
            "dryRun": self.dry_run,
            "files": [
                {"file": _display_path(change.path, root), "changes": change.changes}
                for change in self.files
            ],
            "details": self.details(root),
            "failures": [
                {"file": _display_path(f.path, root), "reason": f.reason}
                for f in self.failures
            ],
            "skippedLocations": [
                f"{_display_path(location.file, root)}:{location.line}"
                for location in self.held_back
            ],
        }


def _display_path(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def validate_identifier(name: str, what: str = "name") -> None:
    if not name or not name.strip():
        raise InputError(f"The {what} must not be empty")
    if any(ch.isspace() for ch in name):
        raise InputError(f"The {what} must not contain whitespace: '{name}'")


class RenameSymbolOperation(AbstractOperation):
    """
    Renames every renamable occurrence of one identifier within a scope.

    Files are rewritten independently. A file that cannot be read or written is
    recorded as a failure; the others are still processed.
    """

    def __init__(self, old: str, new: str, scope: Optional[RenameScope] = None):
        self.old = old
        self.new = new
        self.scope = scope or RenameScope.project()

    def validate(self) -> None:
        validate_identifier(self.old, "old name")
        validate_identifier(self.new, "new name")
        self.scope.validate()

    def _target_files(self, ctx: RefactorContext, tm: TransactionManager) -> List[Path]:
        if self.scope.kind != SCOPE_PROJECT:
            return [self.scope.path.resolve()]
        return ctx.workspace.find_candidates(self.old, read=tm.read_text)

    def _locate(
        self, ctx: RefactorContext, path: Path, source: str, result: RenameResult
    ) -> List[Occurrence]:
        selection = self.scope.selection
        if selection is None:
            return ctx.locator.find(path, self.old, self.scope.line_range, source=source)

        captures = ctx.registry.captures(path, source)
        chosen = ctx.locator.filter(captures, self.old, self.scope.line_range, selection)
        kept = {occurrence.location for occurrence in chosen}
        result.held_back.extend(
            occurrence.location
            for occurrence in ctx.locator.filter(captures, self.old, self.scope.line_range)
            if occurrence.location not in kept
        )
        return chosen

    def analyze(
        self, ctx: RefactorContext, tm: TransactionManager, result: RenameResult
    ) -> None:
        rewriter = OccurrenceRewriter(self.old, self.new)

        for path in self._target_files(ctx, tm):
            if not ctx.registry.supports(path):
                log.debug(f"No capture source for {path}, skipped")
                if self.scope.kind != SCOPE_PROJECT:
                    bus.warning("rename.file.skipped", path=path)
                result.skipped.append(path)
                continue

            try:
                source = tm.read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                log.warning(f"Could not read {path}: {e}")
                result.failures.append(FileFailure(path=path, reason=str(e)))
                continue

            occurrences = self._locate(ctx, path, source, result)
            if not occurrences:
                continue

            rewrite = rewriter.rewrite(source, occurrences)
            if not rewrite.applied:
                continue

            bus.debug(
                "rename.file.planned",
                path=_display_path(path, ctx.workspace.root_path),
                count=len(rewrite.applied),
            )
            tm.add_write(path, rewrite.source)
            result.files.append(
                FileChange(path=path, occurrences=rewrite.applied, edits=rewrite.edits)
            )

    def execute(
        self,
        ctx: RefactorContext,
        dry_run: bool = False,
        tm: Optional[TransactionManager] = None,
        operation: Optional[str] = None,
    ) -> RenameResult:
        """
        Plans and commits the rename through `tm`.

        A shared transaction lets callers chain several renames; in dry-run mode
        each one then sees the content the previous ones would have produced.
        """
        self.validate()
        if tm is None:
            tm = TransactionManager(ctx.workspace.root_path, dry_run=dry_run)
        result = RenameResult(old=self.old, new=self.new, dry_run=tm.dry_run)

        if self.old == self.new:
            return result

        self.analyze(ctx, tm, result)

        if tm.pending_count and not tm.dry_run and ctx.backup is not None:
            result.backup_id = ctx.backup.snapshot(
                operation or f"rename {self.old} -> {self.new}", tm.pending_paths()
            )

        commit = tm.commit()
        if commit.failures:
            failed = {failure.path for failure in commit.failures}
            result.files = [change for change in result.files if change.path not in failed]
            result.failures.extend(commit.failures)

        return result
