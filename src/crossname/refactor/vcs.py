import logging
import subprocess
from pathlib import Path
from typing import Iterable, List

log = logging.getLogger(__name__)


class GitStager:
    """
    Stages and commits rewritten files with the git CLI.

    Git problems never undo a rename that already happened on disk; they are
    logged and reported as a False return.
    """

    def __init__(self, root_path: Path, binary: str = "git"):
        self.root_path = root_path
        self.binary = binary

    def _run(self, args: List[str]) -> bool:
        try:
            completed = subprocess.run(
                [self.binary, *args],
                cwd=self.root_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            log.warning(f"Could not run {self.binary}: {e}")
            return False
        if completed.returncode != 0:
            log.warning(f"{self.binary} {args[0]} failed: {completed.stderr.strip()}")
            return False
        return True

    def is_repository(self) -> bool:
        return self._run(["rev-parse", "--is-inside-work-tree"])

    def is_dirty(self) -> bool:
        try:
            completed = subprocess.run(
                [self.binary, "status", "--porcelain"],
                cwd=self.root_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            log.warning(f"Could not run {self.binary}: {e}")
            return False
        return completed.returncode == 0 and bool(completed.stdout.strip())

    def stage(self, paths: Iterable[Path]) -> bool:
        args = [str(p) for p in paths]
        if not args:
            return True
        return self._run(["add", "--", *args])

    def commit(self, message: str) -> bool:
        return self._run(["commit", "-m", message])
