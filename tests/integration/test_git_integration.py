import shutil
import subprocess

import pytest
from typer.testing import CliRunner

from crossname.cli.main import app

runner = CliRunner()

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(root, *args):
    return subprocess.run(
        ["git", *args], cwd=root, check=True, capture_output=True, text=True
    ).stdout.strip()


def test_git_flag_stages_changed_files(workspace_factory):
    root = (
        workspace_factory.with_source("a.py", "old = 1\n")
        .with_source("b.py", "other = 2\n")
        .init_git()
        .build()
    )

    result = runner.invoke(app, ["rename", "old", "new", "--git"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Staged 1 file(s) in git" in result.stdout
    assert _git(root, "diff", "--cached", "--name-only") == "a.py"


def test_git_commit_creates_a_commit(workspace_factory):
    root = workspace_factory.with_source("a.py", "old = 1\n").init_git().build()

    result = runner.invoke(
        app,
        ["rename", "old", "new", "--git-commit", "Rename old to new"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "Committed: Rename old to new" in result.stdout
    assert _git(root, "log", "-1", "--format=%s") == "Rename old to new"
    assert _git(root, "diff", "--cached", "--name-only") == ""


def test_config_enables_git_for_batch(workspace_factory):
    root = (
        workspace_factory.with_source("a.py", "A = 1\nB = 2\n")
        .with_mapping({"A": "B", "B": "A"})
        .with_config({"git_integration": True, "backup": False})
        .init_git()
        .build()
    )

    result = runner.invoke(app, ["batch", "--map", "renames.json"], catch_exceptions=False)

    assert result.exit_code == 0
    assert _git(root, "diff", "--cached", "--name-only") == "a.py"


def test_dirty_tree_warns_before_renaming(workspace_factory):
    root = workspace_factory.with_source("a.py", "old = 1\n").init_git().build()
    (root / "notes.txt").write_text("scratch\n", encoding="utf-8")

    result = runner.invoke(app, ["rename", "old", "new", "--git"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Working directory has uncommitted changes" in result.stdout


def test_git_outside_a_repository_only_warns(workspace_factory):
    workspace_factory.with_source("a.py", "old = 1\n").build()

    result = runner.invoke(app, ["rename", "old", "new", "--git"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Could not stage changed files in git" in result.stdout
    assert workspace_factory.read("a.py") == "new = 1\n"
