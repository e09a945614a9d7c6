# tarball_service/services/streamer.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator

from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from tarball_service.errors import StreamError

logger = logging.getLogger("tarball_service.streamer")

MEDIA_TYPE = "application/gzip"


def _iter_file(fh: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    with fh:
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            yield chunk


class ResponseStreamer:
    """
    Builds the streaming response for a finished archive.

    The file is opened here, before the workspace is removed; the open handle
    keeps the bytes readable after the directory is gone.
    The handle is closed when the body is exhausted, and by the response's
    background task for a body that was never (or only partly) iterated.
    """

    def __init__(self, chunk_size: int = 64 * 1024):
        self.chunk_size = chunk_size

    def send(self, archive_path: Path, archive_name: str) -> StreamingResponse:
        try:
            fh = open(archive_path, "rb")
        except OSError as e:
            raise StreamError(f"cannot open archive: {e}", archive=str(archive_path)) from e
        try:
            size = os.fstat(fh.fileno()).st_size
        except OSError as e:
            fh.close()
            raise StreamError(f"cannot stat archive: {e}", archive=str(archive_path)) from e

        headers = {
            "Content-Disposition": f"attachment; filename={archive_name}",
            "Content-Length": str(size),
        }
        logger.info("Streaming archive", extra={"archive": archive_name, "bytes": size})
        return StreamingResponse(
            _iter_file(fh, self.chunk_size),
            media_type=MEDIA_TYPE,
            headers=headers,
            background=BackgroundTask(fh.close),
        )
