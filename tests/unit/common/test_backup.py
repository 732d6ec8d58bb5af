import json
from datetime import datetime, timedelta, timezone

import pytest

from crossname.refactor.backup import (
    ACTION_MISSING,
    ACTION_MODIFIED,
    BACKUP_DIR,
    METADATA_FILE,
    BackupManager,
)
from crossname.refactor.exceptions import BackupError


def test_snapshot_copies_files_and_writes_metadata(workspace_factory):
    root = (
        workspace_factory.with_source("src/a.py", "a = 1\n")
        .with_source("b.py", "b = 2\n")
        .build()
    )
    manager = BackupManager(root)

    backup_id = manager.snapshot("rename a -> c", [root / "src/a.py", root / "b.py"])

    target = root / BACKUP_DIR / backup_id
    assert (target / "src/a.py").read_text(encoding="utf-8") == "a = 1\n"
    meta = json.loads((target / METADATA_FILE).read_text(encoding="utf-8"))
    assert meta["id"] == backup_id
    assert meta["operation"] == "rename a -> c"
    assert meta["files"] == [
        {"path": "src/a.py", "action": ACTION_MODIFIED},
        {"path": "b.py", "action": ACTION_MODIFIED},
    ]


def test_snapshot_of_nothing_creates_no_backup(tmp_path):
    manager = BackupManager(tmp_path)

    assert manager.snapshot("noop", []) is None
    assert not (tmp_path / BACKUP_DIR).exists()


def test_snapshot_records_missing_files(tmp_path):
    manager = BackupManager(tmp_path)

    backup_id = manager.snapshot("rename", [tmp_path / "gone.py"])

    record = manager.load(backup_id)
    assert [(f.path, f.action) for f in record.files] == [("gone.py", ACTION_MISSING)]


def test_snapshot_rejects_paths_outside_root(tmp_path):
    manager = BackupManager(tmp_path / "project")

    with pytest.raises(BackupError):
        manager.snapshot("rename", [tmp_path / "elsewhere.py"])


def test_ids_are_unique_within_the_same_second(workspace_factory):
    root = workspace_factory.with_source("a.py", "a = 1\n").build()
    manager = BackupManager(root)

    ids = {manager.snapshot("op", [root / "a.py"]) for _ in range(3)}

    assert len(ids) == 3


def test_restore_brings_back_original_content(workspace_factory):
    root = workspace_factory.with_source("a.py", "a = 1\n").build()
    manager = BackupManager(root)
    backup_id = manager.snapshot("rename", [root / "a.py", root / "gone.py"])
    (root / "a.py").write_text("changed = 1\n", encoding="utf-8")

    restored, skipped = manager.restore(backup_id)

    assert restored == [root / "a.py"]
    assert skipped == ["gone.py"]
    assert (root / "a.py").read_text(encoding="utf-8") == "a = 1\n"


def test_restore_unknown_backup_raises(tmp_path):
    with pytest.raises(BackupError, match="not found"):
        BackupManager(tmp_path).restore("19990101-000000")


def test_list_and_latest_ignore_broken_entries(workspace_factory):
    root = workspace_factory.with_source("a.py", "a = 1\n").build()
    manager = BackupManager(root)
    first = manager.snapshot("first", [root / "a.py"])
    second = manager.snapshot("second", [root / "a.py"])
    (root / BACKUP_DIR / "zzz-broken").mkdir()
    (root / BACKUP_DIR / "zzz-broken" / METADATA_FILE).write_text("{", encoding="utf-8")

    records = manager.list_backups()

    assert [r.id for r in records] == [first, second]
    assert manager.latest().id == second


def test_latest_without_backups(tmp_path):
    assert BackupManager(tmp_path).latest() is None
    assert BackupManager(tmp_path).list_backups() == []


def test_clean_removes_only_old_backups(workspace_factory):
    root = workspace_factory.with_source("a.py", "a = 1\n").build()
    manager = BackupManager(root)
    backup_id = manager.snapshot("op", [root / "a.py"])
    created_at = manager.load(backup_id).created_at

    assert manager.clean(days=7, now=created_at + timedelta(days=1)) == []
    assert manager.clean(days=7, now=created_at + timedelta(days=8)) == [backup_id]
    assert not (root / BACKUP_DIR / backup_id).exists()


def test_created_at_parses_utc_timestamp(workspace_factory):
    root = workspace_factory.with_source("a.py", "a = 1\n").build()
    manager = BackupManager(root)
    before = datetime.now(timezone.utc).replace(microsecond=0)

    record = manager.load(manager.snapshot("op", [root / "a.py"]))

    assert record.created_at >= before
    assert record.created_at.tzinfo is timezone.utc
