import pytest

from crossname.lang import CaptureRegistry
from crossname.refactor.engine import ReferenceFinder, SymbolLocator, classify
from crossname.refactor.workspace import Workspace
from crossname.spec import CaptureKind, ReferenceRole


def test_classify_maps_kinds_to_roles():
    assert classify(CaptureKind.DEFINITION) is ReferenceRole.DEFINITION
    assert classify(CaptureKind.REFERENCE) is ReferenceRole.REFERENCE
    assert classify(CaptureKind.TYPE_REFERENCE) is ReferenceRole.REFERENCE
    assert classify(CaptureKind.IMPORT) is ReferenceRole.IMPORT
    assert classify(CaptureKind.EXPORT) is ReferenceRole.EXPORT
    assert classify(CaptureKind.PARAMETER) is ReferenceRole.PARAMETER


@pytest.mark.parametrize("kind", [CaptureKind.STRING_LITERAL, CaptureKind.COMMENT])
def test_excluded_kinds_have_no_role(kind):
    with pytest.raises(ValueError):
        classify(kind)


def test_reference_finder_groups_by_role(workspace_factory):
    root = (
        workspace_factory.with_source(
            "pkg/core.py", "def helper(helper_arg):\n    return helper_arg\n"
        )
        .with_source(
            "pkg/app.py",
            "from pkg.core import helper\n\n# helper is used here\nhelper(1)\n",
        )
        .with_source("README.md", "helper")
        .build()
    )
    registry = CaptureRegistry(backend="libcst")
    finder = ReferenceFinder(Workspace(root), SymbolLocator(registry))

    report = finder.find("helper")

    assert report.total == 3
    data = report.to_dict(root)
    assert data == {
        "symbol": "helper",
        "total": 3,
        "definitions": ["pkg/core.py:1:5"],
        "references": ["pkg/app.py:4:1"],
        "imports": ["pkg/app.py:1:22"],
        "exports": [],
        "parameters": [],
    }


def test_reference_finder_reports_nothing_for_unknown_symbol(workspace_factory):
    root = workspace_factory.with_source("a.py", "x = 1\n").build()
    finder = ReferenceFinder(Workspace(root), SymbolLocator(CaptureRegistry(backend="libcst")))

    report = finder.find("nothing_here")

    assert report.total == 0
    assert report.to_dict(root)["definitions"] == []
