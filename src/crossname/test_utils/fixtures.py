from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

import pytest

from crossname.config import RefactorConfig
from crossname.refactor.engine import RefactorContext
from crossname.spec import BackupServiceProtocol

if TYPE_CHECKING:
    from .workspace import WorkspaceFactory
    from .bus import SpyBus


@pytest.fixture
def workspace_factory(tmp_path: Path) -> "WorkspaceFactory":
    """Provides a factory to create isolated test workspaces."""
    from .workspace import WorkspaceFactory

    return WorkspaceFactory(tmp_path)


@pytest.fixture
def spy_bus() -> "SpyBus":
    """Provides a SpyBus instance to intercept and inspect bus messages."""
    from .bus import SpyBus

    return SpyBus()


@pytest.fixture
def make_context() -> Callable[..., RefactorContext]:
    """
    Builds a refactor context for a workspace root. Config fields can be passed
    as keywords; the backend defaults to libcst so tests never need tree-sitter.
    """

    def _make(
        root: Path, backup: Optional[BackupServiceProtocol] = None, **config
    ) -> RefactorContext:
        config.setdefault("backend", "libcst")
        return RefactorContext.from_config(root, RefactorConfig(**config), backup=backup)

    return _make
