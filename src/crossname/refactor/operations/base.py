from abc import ABC, abstractmethod
from typing import Any

from crossname.refactor.engine.context import RefactorContext


class AbstractOperation(ABC):
    @abstractmethod
    def execute(self, ctx: RefactorContext, dry_run: bool = False) -> Any:
        pass
