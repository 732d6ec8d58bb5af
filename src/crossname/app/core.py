from pathlib import Path
from typing import List, Optional, Sequence, Union

from crossname.common import bus
from crossname.config import RefactorConfig, load_config_from_path
from crossname.refactor.backup import BackupManager, BackupRecord
from crossname.refactor.exceptions import BackupError
from crossname.refactor.engine import ReferenceFinder, ReferenceReport, RefactorContext
from crossname.refactor.mapping import MappingLoader
from crossname.refactor.naming import NamingCase
from crossname.refactor.operations import (
    BatchRenameOperation,
    BatchReport,
    RenameCaseOperation,
    RenameResult,
    RenameScope,
    RenameSymbolOperation,
)
from crossname.refactor.vcs import GitStager
from crossname.spec import RenameMapping, VcsProtocol


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


class CrossnameApp:
    def __init__(
        self,
        root_path: Path,
        config: Optional[RefactorConfig] = None,
        use_config: bool = True,
        vcs: Optional[VcsProtocol] = None,
    ):
        self.root_path = root_path.resolve()
        if config is None:
            config = load_config_from_path(self.root_path) if use_config else RefactorConfig()
        self.config = config
        self.backups = BackupManager(self.root_path)
        self.vcs = vcs or GitStager(self.root_path)

    def _context(self, dry_run: bool) -> RefactorContext:
        backup = self.backups if self.config.backup and not dry_run else None
        return RefactorContext.from_config(self.root_path, self.config, backup=backup)

    def _git_enabled(self, git: Optional[bool], git_commit: Optional[str]) -> bool:
        if git_commit:
            return True
        if git is not None:
            return git
        return self.config.git_integration

    def _warn_if_dirty(self, enabled: bool, dry_run: bool) -> None:
        if enabled and not dry_run and self.vcs.is_dirty():
            bus.warning("vcs.warning.dirty")

    def _stage(self, paths: Sequence[Path], git_commit: Optional[str]) -> None:
        if not paths:
            return
        if not self.vcs.stage(paths):
            bus.warning("vcs.warning.stage_failed")
            return
        bus.info("vcs.run.staged", count=len(paths))
        if git_commit:
            if self.vcs.commit(git_commit):
                bus.success("vcs.run.committed", message=git_commit)
            else:
                bus.warning("vcs.warning.commit_failed")

    def run_rename(
        self,
        old: str,
        new: str,
        scope: Optional[RenameScope] = None,
        dry_run: bool = False,
        git: Optional[bool] = None,
        git_commit: Optional[str] = None,
    ) -> RenameResult:
        return self._apply_rename(
            RenameSymbolOperation(old, new, scope), dry_run, git, git_commit
        )

    def run_rename_case(
        self,
        symbol: str,
        case: Union[NamingCase, str],
        scope: Optional[RenameScope] = None,
        dry_run: bool = False,
        git: Optional[bool] = None,
        git_commit: Optional[str] = None,
    ) -> RenameResult:
        operation = RenameCaseOperation(symbol, case, scope)
        if operation.unchanged:
            bus.info("rename.case.unchanged", old=symbol, case=operation.case.value)
            return RenameResult(old=symbol, new=symbol, dry_run=dry_run)

        bus.info(
            "rename.case.converting",
            old=symbol,
            new=operation.new,
            detected=operation.detected_case.value,
            case=operation.case.value,
        )
        return self._apply_rename(operation, dry_run, git, git_commit)

    def _apply_rename(
        self,
        operation: RenameSymbolOperation,
        dry_run: bool,
        git: Optional[bool],
        git_commit: Optional[str],
    ) -> RenameResult:
        git_enabled = self._git_enabled(git, git_commit)
        self._warn_if_dirty(git_enabled, dry_run)

        ctx = self._context(dry_run)
        bus.info("rename.run.start", old=operation.old, new=operation.new)
        result = operation.execute(ctx, dry_run=dry_run)

        for failure in result.failures:
            bus.error(
                "rename.file.failed",
                path=_relative(failure.path, self.root_path),
                reason=failure.reason,
            )
        if result.backup_id:
            bus.info("backup.run.created", id=result.backup_id)

        if git_enabled and not dry_run:
            self._stage([change.path for change in result.files], git_commit)
        return result

    def run_batch(
        self,
        map_file: Optional[Path] = None,
        mappings: Optional[Sequence[RenameMapping]] = None,
        dry_run: bool = False,
        git: Optional[bool] = None,
        git_commit: Optional[str] = None,
    ) -> BatchReport:
        if mappings is None:
            if map_file is None:
                raise ValueError("Either map_file or mappings is required")
            mappings = MappingLoader().load_from_path(map_file)

        git_enabled = self._git_enabled(git, git_commit)
        self._warn_if_dirty(git_enabled, dry_run)

        ctx = self._context(dry_run)
        bus.info("batch.run.start", count=len(mappings))
        report = BatchRenameOperation(mappings).execute(ctx, dry_run=dry_run)
        if report.backup_id:
            bus.info("backup.run.created", id=report.backup_id)

        if git_enabled and not dry_run:
            self._stage(sorted(report.files), git_commit)
        return report

    def run_refs(self, symbol: str) -> ReferenceReport:
        ctx = self._context(dry_run=True)
        return ReferenceFinder(ctx.workspace, ctx.locator).find(symbol)

    def list_backups(self) -> List[BackupRecord]:
        return self.backups.list_backups()

    def run_undo(self, backup_id: Optional[str] = None) -> BackupRecord:
        """Restores `backup_id`, or the most recent backup when none is given."""
        if backup_id is None:
            record = self.backups.latest()
            if record is None:
                raise BackupError("No backups found")
        else:
            record = self.backups.load(backup_id)

        restored, skipped = self.backups.restore(record.id)
        for path in skipped:
            bus.warning("backup.warning.skipped", path=path)
        bus.success("backup.run.restored", id=record.id, count=len(restored))
        return record

    def run_clean(self, days: int = 7) -> List[str]:
        removed = self.backups.clean(days=days)
        bus.success("backup.run.cleaned", count=len(removed), days=days)
        return removed
