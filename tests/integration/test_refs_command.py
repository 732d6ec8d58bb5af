import json

from typer.testing import CliRunner

from crossname.cli.main import app

runner = CliRunner()


def _build(workspace_factory):
    workspace_factory.with_source(
        "a.py", 'def helper(x):\n    return x\n\nhelper(1)  # helper\nprint("helper")\n'
    ).with_source("b.py", "from a import helper\n").build()


def test_refs_json(workspace_factory):
    _build(workspace_factory)

    result = runner.invoke(
        app, ["--loglevel", "error", "refs", "helper", "--format", "json"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["symbol"] == "helper"
    assert data["total"] == 3
    assert data["definitions"] == ["a.py:1:5"]
    assert data["imports"] == ["b.py:1:15"]


def test_refs_text_groups_by_role(workspace_factory):
    _build(workspace_factory)

    result = runner.invoke(app, ["refs", "helper"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "=== References to 'helper' (3) ===" in result.stdout
    assert "Definitions (1):" in result.stdout
    assert "  a.py:1:5" in result.stdout
    assert "Imports (1):" in result.stdout
    assert "Exports" not in result.stdout


def test_refs_does_not_modify_anything(workspace_factory):
    _build(workspace_factory)
    before = workspace_factory.snapshot()

    runner.invoke(app, ["refs", "helper"], catch_exceptions=False)

    assert workspace_factory.snapshot() == before


def test_refs_without_hits(workspace_factory):
    _build(workspace_factory)

    result = runner.invoke(app, ["refs", "missing"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "No references to 'missing' found" in result.stdout
