from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from crossname.config import RefactorConfig
from crossname.lang import CaptureRegistry
from crossname.refactor.workspace import Workspace
from crossname.spec import BackupServiceProtocol
from .locator import SymbolLocator


@dataclass
class RefactorContext:
    workspace: Workspace
    registry: CaptureRegistry
    locator: SymbolLocator
    config: RefactorConfig
    backup: Optional[BackupServiceProtocol] = None

    @classmethod
    def from_config(
        cls,
        root_path: Path,
        config: RefactorConfig,
        backup: Optional[BackupServiceProtocol] = None,
    ) -> "RefactorContext":
        registry = CaptureRegistry.from_config(config)
        workspace = Workspace(root_path, registry.language_map, exclude=config.exclude)
        return cls(
            workspace=workspace,
            registry=registry,
            locator=SymbolLocator(registry),
            config=config,
            backup=backup,
        )
