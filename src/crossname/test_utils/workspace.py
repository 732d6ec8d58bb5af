import json
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional


class WorkspaceFactory:
    """Builds small on-disk projects for tests, one file at a time."""

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files: Dict[str, str] = {}
        self._git = False

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files[path] = content
        return self

    def with_config(self, config: Dict[str, Any]) -> "WorkspaceFactory":
        """Writes `config` as a JSON .refactorrc."""
        self._files[".refactorrc"] = json.dumps(config, indent=2)
        return self

    def with_pyproject(self, content: str) -> "WorkspaceFactory":
        self._files["pyproject.toml"] = content
        return self

    def with_mapping(
        self, renames: Dict[str, str], path: str = "renames.json"
    ) -> "WorkspaceFactory":
        entries = [{"old": old, "new": new} for old, new in renames.items()]
        self._files[path] = json.dumps({"renames": entries}, indent=2)
        return self

    def init_git(self) -> "WorkspaceFactory":
        self._git = True
        return self

    def build(self) -> Path:
        for rel_path, content in self._files.items():
            path = self.root_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            # newline="" keeps \r\n in test sources as written.
            with path.open("w", encoding="utf-8", newline="") as f:
                f.write(content)

        if self._git:
            self._run_git("init", "-q")
            self._run_git("config", "user.email", "test@example.com")
            self._run_git("config", "user.name", "Test")
            self._run_git("add", "-A")
            self._run_git("commit", "-q", "-m", "initial")
        return self.root_path

    def _run_git(self, *args: str) -> None:
        subprocess.run(["git", *args], cwd=self.root_path, check=True, capture_output=True)

    def read(self, rel_path: str) -> str:
        return (self.root_path / rel_path).read_bytes().decode("utf-8")

    def path(self, rel_path: str) -> Path:
        return self.root_path / rel_path

    def snapshot(self, exclude: Optional[str] = ".refactor-backup") -> Dict[str, bytes]:
        """Content of every file in the project, keyed by relative path."""
        result: Dict[str, bytes] = {}
        for path in sorted(self.root_path.rglob("*")):
            if not path.is_file():
                continue
            rel = path.relative_to(self.root_path).as_posix()
            if (exclude and rel.startswith(exclude)) or rel.startswith(".git/"):
                continue
            result[rel] = path.read_bytes()
        return result
