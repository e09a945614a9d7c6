# tarball_service/services/fetcher.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from tarball_service.errors import DownloadError
from tarball_service.services.deadline import Deadline, check_deadline

logger = logging.getLogger("tarball_service.fetcher")


def snapshot_url(repo_url: str, ref: str) -> str:
    """Provider archive endpoint for a revision: {repo_url}/archive/{ref}.zip"""
    return f"{repo_url.rstrip('/')}/archive/{ref}.zip"


class ArchiveFetcher:
    """
    Streams a snapshot zip to disk over HTTP.

    Archive endpoints usually redirect to a separate download host, so
    redirects are followed. Only a final 200 counts as success.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        chunk_size: int = 1024 * 1024,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._transport = transport

    def _client(self, deadline: Optional[Deadline]) -> httpx.Client:
        timeout = self.timeout
        if deadline is not None:
            timeout = min(timeout, max(deadline.remaining(), 0.001))
        return httpx.Client(timeout=timeout, follow_redirects=True, transport=self._transport)

    def fetch(self, url: str, destination: Path, deadline: Optional[Deadline] = None) -> int:
        """Download `url` into `destination`; returns the number of bytes written."""
        check_deadline(deadline, "download")
        written = 0
        try:
            with self._client(deadline) as client, client.stream("GET", url) as resp:
                if resp.status_code != httpx.codes.OK:
                    raise DownloadError(
                        f"failed to download file: {resp.status_code} {resp.reason_phrase}",
                        status=resp.status_code,
                        url=url,
                    )
                with destination.open("wb") as fh:
                    for chunk in resp.iter_bytes(chunk_size=self.chunk_size):
                        fh.write(chunk)
                        written += len(chunk)
                        check_deadline(deadline, "download")
        except httpx.TimeoutException as e:
            # A shortened client timeout is how an enforced deadline surfaces mid-transfer
            check_deadline(deadline, "download")
            raise DownloadError(f"transport timeout: {e!r}", url=url) from e
        except httpx.HTTPError as e:
            raise DownloadError(f"transport error: {e!r}", url=url) from e
        except OSError as e:
            raise DownloadError(f"cannot write snapshot: {e}", url=url, destination=str(destination)) from e

        logger.info("Snapshot downloaded", extra={"url": url, "bytes": written})
        return written
