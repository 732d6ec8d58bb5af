from typer.testing import CliRunner

from crossname.cli.main import app
from crossname.refactor.backup import BACKUP_DIR

runner = CliRunner()


def test_list_and_restore_last(workspace_factory):
    workspace_factory.with_source("a.py", "old = 1\n").build()
    runner.invoke(app, ["rename", "old", "new"], catch_exceptions=False)
    assert workspace_factory.read("a.py") == "new = 1\n"

    listed = runner.invoke(app, ["undo", "--list"], catch_exceptions=False)
    assert listed.exit_code == 0
    assert "Available backups:" in listed.stdout
    assert "rename old -> new (1 file(s))" in listed.stdout

    restored = runner.invoke(app, ["undo", "--last"], catch_exceptions=False)
    assert restored.exit_code == 0
    assert "Restored backup" in restored.stdout
    assert workspace_factory.read("a.py") == "old = 1\n"


def test_restore_by_id(workspace_factory):
    workspace_factory.with_source("a.py", "old = 1\n").build()
    runner.invoke(app, ["rename", "old", "mid"], catch_exceptions=False)
    first_id = next(workspace_factory.path(BACKUP_DIR).iterdir()).name
    runner.invoke(app, ["rename", "mid", "new"], catch_exceptions=False)

    result = runner.invoke(app, ["undo", "--id", first_id], catch_exceptions=False)

    assert result.exit_code == 0
    assert workspace_factory.read("a.py") == "old = 1\n"


def test_list_without_backups(workspace_factory):
    workspace_factory.build()

    result = runner.invoke(app, ["undo", "--list"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "No backups found." in result.stdout


def test_restore_without_backups_fails(workspace_factory):
    workspace_factory.build()

    result = runner.invoke(app, ["undo", "--last"], catch_exceptions=False)

    assert result.exit_code == 1
    assert "No backups found" in result.stdout


def test_unknown_id_fails(workspace_factory):
    workspace_factory.build()

    result = runner.invoke(app, ["undo", "--id", "nope"], catch_exceptions=False)

    assert result.exit_code == 1
    assert "Backup not found: nope" in result.stdout


def test_exactly_one_action_is_required(workspace_factory):
    workspace_factory.build()

    for args in (["undo"], ["undo", "--list", "--last"]):
        result = runner.invoke(app, args, catch_exceptions=False)
        assert result.exit_code == 1
        assert "Choose exactly one of" in result.stdout


def test_clean_keeps_recent_backups(workspace_factory):
    workspace_factory.with_source("a.py", "old = 1\n").build()
    runner.invoke(app, ["rename", "old", "new"], catch_exceptions=False)

    result = runner.invoke(app, ["undo", "--clean", "--days", "7"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Removed 0 backup(s) older than 7 day(s)" in result.stdout
    assert any(workspace_factory.path(BACKUP_DIR).iterdir())
