import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import BackupError

log = logging.getLogger(__name__)

BACKUP_DIR = ".refactor-backup"
METADATA_FILE = "metadata.json"

ACTION_MODIFIED = "modified"
ACTION_MISSING = "missing"


@dataclass
class BackupEntry:
    path: str
    action: str


@dataclass
class BackupRecord:
    id: str
    timestamp: str
    operation: str
    files: List[BackupEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackupRecord":
        return cls(
            id=data["id"],
            timestamp=data.get("timestamp", ""),
            operation=data.get("operation", ""),
            files=[
                BackupEntry(f["path"], f.get("action", ACTION_MODIFIED))
                for f in data.get("files", [])
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "operation": self.operation,
            "files": [{"path": f.path, "action": f.action} for f in self.files],
        }

    @property
    def created_at(self) -> Optional[datetime]:
        try:
            return datetime.strptime(self.timestamp, "%Y-%m-%dT%H:%M:%SZ").replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            return None


class BackupManager:
    """
    Snapshots files under `<root>/.refactor-backup/<id>/` before they are
    rewritten, and restores them on request.

    Each snapshot holds a copy of every file (at its project-relative path)
    plus a metadata.json describing the operation.
    """

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self.backup_root = root_path / BACKUP_DIR

    def _new_id(self, now: datetime) -> str:
        base = now.strftime("%Y%m%d-%H%M%S")
        backup_id = base
        suffix = 1
        while (self.backup_root / backup_id).exists():
            backup_id = f"{base}-{suffix}"
            suffix += 1
        return backup_id

    def _relative(self, path: Path) -> Path:
        abs_path = path if path.is_absolute() else self.root_path / path
        try:
            return abs_path.relative_to(self.root_path)
        except ValueError:
            raise BackupError(f"Cannot back up a file outside the project: {path}") from None

    def snapshot(self, operation: str, paths: Iterable[Path]) -> Optional[str]:
        rel_paths = [self._relative(path) for path in paths]
        if not rel_paths:
            return None

        now = datetime.now(timezone.utc)
        backup_id = self._new_id(now)
        target = self.backup_root / backup_id
        record = BackupRecord(
            id=backup_id,
            timestamp=now.strftime("%Y-%m-%dT%H:%M:%SZ"),
            operation=operation,
        )

        try:
            target.mkdir(parents=True)
            for rel_path in rel_paths:
                source = self.root_path / rel_path
                if not source.exists():
                    record.files.append(BackupEntry(rel_path.as_posix(), ACTION_MISSING))
                    continue
                dest = target / rel_path
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, dest)
                record.files.append(BackupEntry(rel_path.as_posix(), ACTION_MODIFIED))

            (target / METADATA_FILE).write_text(
                json.dumps(record.to_dict(), indent=2), encoding="utf-8"
            )
        except OSError as e:
            shutil.rmtree(target, ignore_errors=True)
            raise BackupError(f"Could not create backup {backup_id}: {e}") from e

        log.info(f"Backup {backup_id} created for {len(record.files)} file(s)")
        return backup_id

    def load(self, backup_id: str) -> BackupRecord:
        meta = self.backup_root / backup_id / METADATA_FILE
        if not meta.is_file():
            raise BackupError(f"Backup not found: {backup_id}")
        try:
            return BackupRecord.from_dict(json.loads(meta.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
            raise BackupError(f"Unreadable metadata for backup {backup_id}: {e}") from e

    def list_backups(self) -> List[BackupRecord]:
        """All readable backups, oldest first."""
        if not self.backup_root.is_dir():
            return []
        records: List[BackupRecord] = []
        for entry in sorted(self.backup_root.iterdir()):
            if not entry.is_dir():
                continue
            try:
                records.append(self.load(entry.name))
            except BackupError as e:
                log.warning(str(e))
        return records

    def latest(self) -> Optional[BackupRecord]:
        records = self.list_backups()
        return records[-1] if records else None

    def restore(self, backup_id: str) -> Tuple[List[Path], List[str]]:
        """Copies every saved file back. Returns (restored paths, skipped entries)."""
        record = self.load(backup_id)
        source_root = self.backup_root / backup_id
        restored: List[Path] = []
        skipped: List[str] = []
        for entry in record.files:
            saved = source_root / entry.path
            if entry.action != ACTION_MODIFIED or not saved.is_file():
                log.warning(f"Backup {backup_id} has no copy of {entry.path}")
                skipped.append(entry.path)
                continue
            dest = self.root_path / entry.path
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(saved, dest)
            except OSError as e:
                raise BackupError(f"Could not restore {entry.path}: {e}") from e
            restored.append(dest)
        return restored, skipped

    def clean(self, days: int = 7, now: Optional[datetime] = None) -> List[str]:
        """Deletes backups older than `days` days and returns their ids."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=days)
        removed: List[str] = []
        for record in self.list_backups():
            created_at = record.created_at
            if created_at is None or created_at >= cutoff:
                continue
            shutil.rmtree(self.backup_root / record.id)
            removed.append(record.id)
        return removed
