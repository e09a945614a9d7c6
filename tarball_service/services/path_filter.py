# tarball_service/services/path_filter.py
from __future__ import annotations

import logging
from pathlib import Path

from tarball_service.errors import PathNotFoundError
from tarball_service.util.fs import ensure_under_root

logger = logging.getLogger("tarball_service.path_filter")


def snapshot_folder(repo_name: str, ref: str) -> str:
    """Top-level folder the provider puts inside a revision archive."""
    return f"{repo_name}-{ref}"


class PathFilter:
    def resolve(self, destination_root: Path, repo_name: str, ref: str, sub_path: str) -> Path:
        if not sub_path:
            return Path(destination_root)

        relative = f"{snapshot_folder(repo_name, ref)}/{sub_path.strip('/')}"
        candidate = Path(destination_root) / relative
        try:
            resolved = ensure_under_root(destination_root, relative)
        except ValueError as e:
            raise PathNotFoundError(str(e), path=str(candidate), sub_path=sub_path) from e

        if not resolved.exists():
            raise PathNotFoundError("Path does not exist", path=str(candidate), sub_path=sub_path)

        logger.info("Filtered to subdirectory", extra={"path": str(resolved)})
        return resolved
