# tarball_service/services/request_interpreter.py
"""
Turns the two supported request shapes into a FetchRequest.

Path form:  GET /{provider}/{owner}/{repo}[/{sub_path...}]?ref=&timeout=
Body form:  POST /  {"path": ..., "repoURL": ..., "targetRevision": ...}
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from tarball_service.config import Settings, settings as default_settings
from tarball_service.errors import RequestMalformed
from tarball_service.models import FetchRequest, FetchSpec, SnapshotRequestBody

INVALID_PATH = "Invalid URL format. Expected: /provider/owner/repo/path"
INVALID_TIMEOUT = "Invalid timeout value"
INVALID_JSON = "Invalid JSON body"
MISSING_FIELDS = "Missing required fields: repoURL and targetRevision"
INVALID_REPO_URL = "Invalid repoURL. Expected: scheme://host/owner/repo"

# Same accepted form as Go strconv.Atoi: optional sign, ASCII digits only
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def repo_name_from_url(repo_url: str) -> str:
    """
    Repository name of `scheme://host/owner/repo[/...]`, i.e. the second path segment.
    """
    parsed = urlparse(repo_url.strip())
    segments = [s for s in parsed.path.split("/") if s]
    if not parsed.scheme or not parsed.netloc or len(segments) < 2:
        raise RequestMalformed(
            f"repoURL lacks owner/repo: {repo_url!r}", message=INVALID_REPO_URL, repo_url=repo_url
        )
    return segments[1]


class RequestInterpreter:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def from_path(self, full_path: str, ref: Optional[str] = None, timeout: Optional[str] = None) -> FetchRequest:
        parts = full_path.lstrip("/").split("/")
        if len(parts) < 3 or not all(parts[:3]):
            raise RequestMalformed(f"too few path segments: {full_path!r}", message=INVALID_PATH, path=full_path)

        provider, owner, repo = parts[0], parts[1], parts[2]
        sub_path = "/".join(parts[3:]).strip("/")

        seconds = self.settings.default_get_timeout
        if timeout:
            if not _INTEGER_RE.fullmatch(timeout):
                raise RequestMalformed(
                    f"timeout is not an integer: {timeout!r}", message=INVALID_TIMEOUT, timeout=timeout
                )
            seconds = int(timeout)

        spec = FetchSpec(
            repo_url=f"https://{provider}/{owner}/{repo}",
            ref=ref or self.settings.default_ref,
            sub_path=sub_path,
            repo_name=repo,
        )
        return FetchRequest(spec=spec, timeout=seconds)

    def from_body(self, body: SnapshotRequestBody) -> FetchRequest:
        if not body.repo_url or not body.target_revision:
            raise RequestMalformed("repoURL or targetRevision missing", message=MISSING_FIELDS)

        spec = FetchSpec(
            repo_url=body.repo_url,
            ref=body.target_revision,
            sub_path=(body.path or "").strip("/"),
            repo_name=repo_name_from_url(body.repo_url),
        )
        return FetchRequest(spec=spec, timeout=self.settings.default_post_timeout)
