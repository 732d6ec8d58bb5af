import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

from crossname.common import bus
from crossname.common.transaction import TransactionManager
from crossname.refactor.engine.context import RefactorContext
from crossname.refactor.engine.planner import BatchPlanner
from crossname.spec import AmbiguousDependency, FileFailure, RenameMapping, RenamePlan
from .base import AbstractOperation
from .rename_symbol import (
    RenameResult,
    RenameScope,
    RenameSymbolOperation,
    _display_path,
    validate_identifier,
)

log = logging.getLogger(__name__)

# Upper bound on re-planning when generated temporary names already occur in
# the project.
MAX_REPLANS = 10


@dataclass(frozen=True)
class ResolutionWarning:
    """A mapping whose old name has no renamable occurrence in the project."""

    old: str
    message: str


@dataclass
class MappingResult:
    old: str
    new: str
    changes: int = 0
    files_touched: Set[Path] = field(default_factory=set)


@dataclass
class BatchReport:
    mappings: List[MappingResult] = field(default_factory=list)
    dry_run: bool = False
    circular_renames: int = 0
    files: Set[Path] = field(default_factory=set)
    failures: List[FileFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    unresolved: List[ResolutionWarning] = field(default_factory=list)
    backup_id: Optional[str] = None
    plan: Optional[RenamePlan] = None

    @property
    def total_changes(self) -> int:
        return sum(m.changes for m in self.mappings)

    @property
    def ambiguities(self) -> List[AmbiguousDependency]:
        return self.plan.ambiguities if self.plan is not None else []

    @property
    def total_files(self) -> int:
        return len(self.files)

    def to_dict(self, root: Optional[Path] = None) -> Dict[str, Any]:
        return {
            "mapping": [
                {
                    "old": m.old,
                    "new": m.new,
                    "changes": m.changes,
                    "filesTouched": len(m.files_touched),
                }
                for m in self.mappings
            ],
            "totalChanges": self.total_changes,
            "totalFiles": self.total_files,
            "circularRenames": self.circular_renames,
            "dryRun": self.dry_run,
            "failures": [
                {"file": _display_path(f.path, root), "reason": f.reason}
                for f in self.failures
            ],
            "warnings": list(self.warnings),
        }


class BatchRenameOperation(AbstractOperation):
    """
    Applies a set of renames as if they all happened at once.

    The planner orders the mappings so that no step renames a name another
    step just produced; cycles go through temporary names. Each step is a
    project-wide single rename.
    """

    def __init__(
        self,
        mappings: Sequence[RenameMapping],
        planner: Optional[BatchPlanner] = None,
    ):
        self.mappings = list(mappings)
        self.planner = planner or BatchPlanner()

    def validate(self) -> None:
        for mapping in self.mappings:
            validate_identifier(mapping.old, "old name")
            validate_identifier(mapping.new, "new name")

    def _temp_name_in_use(self, ctx: RefactorContext, name: str) -> bool:
        for path in ctx.workspace.find_candidates(name):
            if not ctx.registry.supports(path):
                continue
            try:
                if ctx.locator.find(path, name):
                    return True
            except (OSError, UnicodeDecodeError) as e:
                log.debug(f"Could not check {path} for '{name}': {e}")
        return False

    def plan(self, ctx: RefactorContext) -> RenamePlan:
        reserved: Set[str] = set()
        plan = self.planner.plan(self.mappings, reserved=reserved)
        for _ in range(MAX_REPLANS):
            # Pass A steps are the ones that introduce the temporary names.
            temps = {
                step.new
                for step in plan.steps
                if step.is_temp and step.old == self.mappings[step.origin_index].old
            }
            occupied = {name for name in temps if self._temp_name_in_use(ctx, name)}
            if not occupied:
                break
            log.debug(f"Temporary names already in use, re-planning: {sorted(occupied)}")
            reserved |= occupied
            plan = self.planner.plan(self.mappings, reserved=reserved)
        return plan

    def _warn_ambiguities(self, plan: RenamePlan) -> List[str]:
        messages: List[str] = []
        for ambiguity in plan.ambiguities:
            mapping = plan.mappings[ambiguity.index]
            message = bus.render_to_string(
                "batch.warning.ambiguous",
                old=mapping.old,
                new=mapping.new,
                reason=ambiguity.reason,
            )
            bus.warning(
                "batch.warning.ambiguous",
                old=mapping.old,
                new=mapping.new,
                reason=ambiguity.reason,
            )
            log.warning(message)
            messages.append(message)
        return messages

    def _snapshot(self, ctx: RefactorContext) -> Optional[str]:
        # Every file a step can touch already contains one of the old names.
        paths: Set[Path] = set()
        for mapping in self.mappings:
            if mapping.old != mapping.new:
                paths.update(ctx.workspace.find_candidates(mapping.old))
        if not paths:
            return None
        summary = ", ".join(f"{m.old} -> {m.new}" for m in self.mappings)
        return ctx.backup.snapshot(f"batch-rename {summary}", sorted(paths))

    def execute(self, ctx: RefactorContext, dry_run: bool = False) -> BatchReport:
        self.validate()
        plan = self.plan(ctx)

        report = BatchReport(
            mappings=[MappingResult(m.old, m.new) for m in self.mappings],
            dry_run=dry_run,
            circular_renames=len(plan.cycles),
            plan=plan,
        )
        report.warnings.extend(self._warn_ambiguities(plan))

        step_ctx = ctx
        if not dry_run and ctx.backup is not None:
            report.backup_id = self._snapshot(ctx)
            step_ctx = replace(ctx, backup=None)

        # One transaction for the whole batch: in dry-run mode every step reads
        # what the earlier steps would have written.
        tm = TransactionManager(ctx.workspace.root_path, dry_run=dry_run)
        root = ctx.workspace.root_path

        for step in plan.steps:
            mapping = self.mappings[step.origin_index]
            bus.debug("batch.step.start", old=step.old, new=step.new)
            operation = RenameSymbolOperation(step.old, step.new, RenameScope.project())
            result: RenameResult = operation.execute(step_ctx, tm=tm)

            folded = report.mappings[step.origin_index]
            touched = {change.path for change in result.files}
            folded.files_touched |= touched
            report.files |= touched
            report.failures.extend(result.failures)

            if step.old != mapping.old:
                continue
            folded.changes += result.changed_locations

            if (
                result.changed_locations == 0
                and mapping.old != mapping.new
                and not result.failures
            ):
                message = bus.render_to_string("batch.warning.not_found", old=mapping.old)
                bus.warning("batch.warning.not_found", old=mapping.old)
                log.warning(message)
                report.warnings.append(message)
                report.unresolved.append(ResolutionWarning(old=mapping.old, message=message))

        for failure in report.failures:
            bus.error(
                "rename.file.failed",
                path=_display_path(failure.path, root),
                reason=failure.reason,
            )

        return report
