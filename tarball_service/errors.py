# tarball_service/errors.py
"""
Failure taxonomy for the snapshot -> tarball pipeline.

Every error carries the HTTP status it surfaces as, a short message that is
safe to show the caller, and a ``context`` dict (URLs, paths, upstream
status) that only ever goes to the server log.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class TarballError(RuntimeError):
    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, detail: str = "", *, message: Optional[str] = None, **context: Any):
        self.detail = detail or self.message
        if message:
            self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}
        super().__init__(self.detail)


class RequestMalformed(TarballError):
    status_code = 400
    message = "Bad request"


class ResourceError(TarballError):
    status_code = 500
    message = "Failed to create temporary directory"


class DownloadError(TarballError):
    status_code = 500
    message = "Failed to download repository"

    def __init__(self, detail: str = "", *, status: Optional[int] = None, **context: Any):
        self.status = status
        super().__init__(detail, upstream_status=status, **context)


class ExtractionError(TarballError):
    status_code = 500
    message = "Failed to extract ZIP file"


class PathNotFoundError(TarballError):
    status_code = 400
    message = "Specified path does not exist"


class RepackError(TarballError):
    status_code = 500
    message = "Failed to create archive"


class StreamError(TarballError):
    status_code = 500
    message = "Failed to send archive"


class DeadlineExceeded(TarballError):
    status_code = 504
    message = "Request timed out"
