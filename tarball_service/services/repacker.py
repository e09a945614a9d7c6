# tarball_service/services/repacker.py
from __future__ import annotations

import logging
import os
import tarfile
import time
from pathlib import Path
from typing import Iterator, Optional, Tuple

from tarball_service.errors import RepackError
from tarball_service.services.deadline import Deadline, check_deadline

logger = logging.getLogger("tarball_service.repacker")


def archive_name(now: Optional[float] = None) -> str:
    return f"repo-{int(time.time() if now is None else now)}.tar.gz"


def walk_entries(source_root: Path) -> Iterator[Tuple[Path, str]]:
    """
    Yield (filesystem path, archive name) pairs in lexical order, root first.

    Symlinks (to files or directories) are yielded as entries but never followed.
    """
    root = Path(source_root)
    if not root.is_dir() or root.is_symlink():
        yield root, root.name
        return

    yield root, "."

    def _raise(err: OSError) -> None:
        raise err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        base = Path(dirpath)
        names = sorted(dirnames + filenames)
        for name in names:
            path = base / name
            yield path, path.relative_to(root).as_posix()


class Repacker:
    def pack(self, source_root: Path, output_path: Path, deadline: Optional[Deadline] = None) -> int:
        """Write `source_root` as a gzip-compressed tar at `output_path`; returns the entry count."""
        count = 0
        try:
            with tarfile.open(output_path, "w:gz") as tar:
                for path, arcname in walk_entries(source_root):
                    check_deadline(deadline, "repack")
                    info = tar.gettarinfo(str(path), arcname=arcname)
                    if info is None:
                        # sockets and other types tar cannot represent
                        continue
                    logger.debug("Adding file to tar.gz: %s", arcname)
                    if info.isreg():
                        with open(path, "rb") as fh:
                            tar.addfile(info, fh)
                    else:
                        tar.addfile(info)
                    count += 1
        except (OSError, tarfile.TarError) as e:
            raise RepackError(
                f"cannot create archive: {e}",
                source=str(source_root),
                output=str(output_path),
            ) from e

        logger.info("Archive created", extra={"output": str(output_path), "entries": count})
        return count
