# tarball_service/services/workspace.py
from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from tarball_service.errors import ResourceError

logger = logging.getLogger("tarball_service.workspace")

WORKSPACE_PREFIX = "repo-download-"


@dataclass(frozen=True)
class Workspace:
    """
    Request-scoped directory layout:
      <root>/repo-download-XXXX/
        repo.zip           ← downloaded snapshot
        repo/              ← extraction root
        repo-<ts>.tar.gz   ← repacked output
    """

    path: Path

    @property
    def archive_path(self) -> Path:
        return self.path / "repo.zip"

    @property
    def extract_dir(self) -> Path:
        return self.path / "repo"

    def output_path(self, archive_name: str) -> Path:
        return self.path / archive_name


class WorkspaceManager:
    def __init__(self, root: Optional[str] = None):
        self.root = root

    def open(self) -> Workspace:
        try:
            if self.root:
                Path(self.root).mkdir(parents=True, exist_ok=True)
            path = tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=self.root)
        except OSError as e:
            raise ResourceError(f"cannot allocate workspace: {e}", root=self.root) from e
        logger.debug("Workspace opened", extra={"workspace": path})
        return Workspace(path=Path(path))

    def close(self, workspace: Workspace) -> None:
        """Recursively remove the workspace. Safe to call more than once."""
        shutil.rmtree(workspace.path, ignore_errors=True)
        if workspace.path.exists():
            logger.warning("Workspace could not be fully removed: %s", workspace.path)
        else:
            logger.debug("Workspace removed", extra={"workspace": str(workspace.path)})

    @contextmanager
    def session(self) -> Iterator[Workspace]:
        ws = self.open()
        try:
            yield ws
        finally:
            self.close(ws)
