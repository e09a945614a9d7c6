# tarball_service/services/extractor.py
from __future__ import annotations

import logging
import os
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional

from tarball_service.errors import ExtractionError
from tarball_service.services.deadline import Deadline, check_deadline
from tarball_service.util.fs import ensure_under_root, safe_member_path

logger = logging.getLogger("tarball_service.extractor")

DEFAULT_FILE_MODE = 0o644


def _entry_mode(info: zipfile.ZipInfo) -> int:
    """Unix st_mode stored in the upper 16 bits of external_attr (0 when the zip was not made on Unix)."""
    return (info.external_attr >> 16) & 0xFFFF


class ArchiveExtractor:
    """
    Unpacks a snapshot zip under a destination root.

    Each entry is handled on its own: parent directories are created on
    demand, so entry order inside the zip does not matter. Entries whose
    name would land outside the root are skipped and logged.
    """

    def extract(self, zip_path: Path, destination_root: Path, deadline: Optional[Deadline] = None) -> List[Path]:
        destination_root = Path(destination_root)
        try:
            destination_root.mkdir(parents=True, exist_ok=True)
            archive = zipfile.ZipFile(zip_path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ExtractionError(f"cannot open zip: {e}", zip_path=str(zip_path)) from e

        written: List[Path] = []
        skipped = 0
        with archive:
            for info in archive.infolist():
                check_deadline(deadline, "extract")
                try:
                    target = self._target_for(destination_root, info.filename)
                    if target is None:
                        skipped += 1
                        continue
                    logger.debug("Extracting file: %s", target)
                    if info.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    self._write_entry(archive, info, target)
                except (OSError, EOFError, zlib.error, zipfile.BadZipFile) as e:
                    raise ExtractionError(
                        f"cannot extract entry {info.filename!r}: {e}",
                        zip_path=str(zip_path),
                        entry=info.filename,
                    ) from e
                written.append(target)

        logger.info(
            "Snapshot extracted",
            extra={"zip_path": str(zip_path), "files": len(written), "skipped": skipped},
        )
        return written

    def _target_for(self, root: Path, name: str) -> Optional[Path]:
        try:
            return ensure_under_root(root, safe_member_path(name))
        except ValueError as e:
            logger.warning("Skipping unsafe archive entry %r: %s", name, e)
            return None

    def _write_entry(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, target: Path) -> None:
        mode = _entry_mode(info)
        # Links are written as plain files holding the target text; nothing is ever resolved through them
        with archive.open(info, "r") as source, target.open("wb") as out:
            shutil.copyfileobj(source, out)
        os.chmod(target, (mode & 0o777) or DEFAULT_FILE_MODE)
