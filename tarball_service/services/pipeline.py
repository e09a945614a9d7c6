# tarball_service/services/pipeline.py
from __future__ import annotations

import logging
from typing import Optional

from starlette.responses import StreamingResponse

from tarball_service.config import Settings, settings as default_settings
from tarball_service.errors import TarballError
from tarball_service.models import FetchRequest
from tarball_service.services.deadline import Deadline, check_deadline
from tarball_service.services.extractor import ArchiveExtractor
from tarball_service.services.fetcher import ArchiveFetcher, snapshot_url
from tarball_service.services.path_filter import PathFilter
from tarball_service.services.repacker import Repacker, archive_name
from tarball_service.services.streamer import ResponseStreamer
from tarball_service.services.workspace import WorkspaceManager

logger = logging.getLogger("tarball_service.pipeline")


class Pipeline:
    """
    One request, one workspace:

      open workspace -> download -> extract -> [filter] -> repack -> stream -> close workspace

    Any stage failure aborts the rest; the workspace is removed on every exit path.
    Stage objects hold no per-request state, so one Pipeline serves all worker threads.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        workspaces: Optional[WorkspaceManager] = None,
        fetcher: Optional[ArchiveFetcher] = None,
        extractor: Optional[ArchiveExtractor] = None,
        path_filter: Optional[PathFilter] = None,
        repacker: Optional[Repacker] = None,
        streamer: Optional[ResponseStreamer] = None,
    ):
        self.settings = settings or default_settings
        self.workspaces = workspaces or WorkspaceManager(self.settings.workspace_root)
        self.fetcher = fetcher or ArchiveFetcher(
            timeout=self.settings.http_client_timeout_seconds,
            chunk_size=self.settings.download_chunk_size,
        )
        self.extractor = extractor or ArchiveExtractor()
        self.path_filter = path_filter or PathFilter()
        self.repacker = repacker or Repacker()
        self.streamer = streamer or ResponseStreamer()

    def _deadline(self, request: FetchRequest) -> Optional[Deadline]:
        if not self.settings.enforce_request_timeout:
            return None
        return Deadline(request.timeout)

    def run(self, request: FetchRequest) -> StreamingResponse:
        spec = request.spec
        deadline = self._deadline(request)
        zip_url = snapshot_url(spec.repo_url, spec.ref)
        logger.info(
            "Processing %s@%s",
            spec.repo_url,
            spec.ref,
            extra={
                "zip_url": zip_url,
                "sub_path": spec.sub_path,
                "timeout": request.timeout,
                "timeout_enforced": deadline is not None,
            },
        )

        with self.workspaces.session() as ws:
            try:
                self.fetcher.fetch(zip_url, ws.archive_path, deadline)
                self.extractor.extract(ws.archive_path, ws.extract_dir, deadline)
                source = self.path_filter.resolve(ws.extract_dir, spec.repo_name, spec.ref, spec.sub_path)
                check_deadline(deadline, "filter")

                name = archive_name()
                self.repacker.pack(source, ws.output_path(name), deadline)
                return self.streamer.send(ws.output_path(name), name)
            except TarballError as e:
                e.context.setdefault("repo_url", spec.repo_url)
                e.context.setdefault("ref", spec.ref)
                e.context.setdefault("workspace", str(ws.path))
                raise
