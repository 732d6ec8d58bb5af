import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from crossname.common.transaction import read_source
from crossname.spec import Capture
from .adapter import QueryOutputAdapter

log = logging.getLogger(__name__)

QUERIES_DIR = Path(__file__).parent / "queries"


class TreeSitterCaptureSource:
    """
    Runs `tree-sitter query <lang>/symbols.scm <file>` and adapts its output.

    The parser itself is an external collaborator: a missing binary, a missing
    grammar or a failing query all yield no captures for that file.
    """

    def __init__(
        self,
        binary: str = "tree-sitter",
        queries_dir: Path = QUERIES_DIR,
        adapter: Optional[QueryOutputAdapter] = None,
    ):
        self.binary = binary
        self.queries_dir = queries_dir
        self.adapter = adapter or QueryOutputAdapter()

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def query_file(self, language: str) -> Path:
        return self.queries_dir / language / "symbols.scm"

    def run_query(self, path: Path, language: str) -> str:
        query = self.query_file(language)
        if not query.is_file():
            log.debug(f"No symbols query for language '{language}'")
            return ""
        try:
            proc = subprocess.run(
                [self.binary, "query", str(query), str(path)],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            log.warning(f"Could not run {self.binary}: {e}")
            return ""
        if proc.returncode != 0:
            log.debug(f"{self.binary} query failed for {path}: {proc.stderr.strip()}")
        return proc.stdout

    def _matches_disk(self, path: Path, source: str) -> bool:
        try:
            return read_source(path) == source
        except (OSError, UnicodeDecodeError):
            return False

    def captures(self, path: Path, language: str, source: str) -> List[Capture]:
        if self._matches_disk(path, source):
            output = self.run_query(path, language)
        else:
            # The tool only reads files: pending content goes to a scratch copy.
            with tempfile.TemporaryDirectory() as tmp_dir:
                staged = Path(tmp_dir) / path.name
                staged.write_bytes(source.encode("utf-8"))
                output = self.run_query(staged, language)

        if not output:
            return []
        return self.adapter.parse(output, path, source)
