"""Shared fixtures: in-memory snapshot zips, mocked provider transport, wired app client."""

from __future__ import annotations

import io
import stat
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from tarball_service.config import Settings
from tarball_service.dependencies import get_pipeline
from tarball_service.main import app
from tarball_service.services import ArchiveFetcher, Pipeline, WorkspaceManager

# name -> content (bytes/str) or None for a directory entry; (content, mode) to set permission bits
Entry = Union[None, bytes, str, tuple]

WIDGETS_V2: Dict[str, Entry] = {
    "widgets-v2/": None,
    "widgets-v2/README.md": "# widgets\n",
    "widgets-v2/lib/": None,
    "widgets-v2/lib/core.py": "print('core')\n",
    "widgets-v2/lib/util/helpers.py": "X = 1\n",
    "widgets-v2/bin/run.sh": ("#!/bin/sh\necho run\n", 0o755),
}


def build_zip(entries: Dict[str, Entry]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, value in entries.items():
            info = zipfile.ZipInfo(name)
            if value is None:
                info.external_attr = ((stat.S_IFDIR | 0o755) << 16) | 0x10
                zf.writestr(info, b"")
                continue
            mode = 0o644
            if isinstance(value, tuple):
                value, mode = value
            if isinstance(value, str):
                value = value.encode()
            info.external_attr = (stat.S_IFREG | mode) << 16
            zf.writestr(info, value)
    return buf.getvalue()


def tar_names(data: bytes) -> set:
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        return {m.name for m in tar.getmembers()}


def tar_files(data: bytes) -> Dict[str, bytes]:
    out = {}
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        for m in tar.getmembers():
            if m.isreg():
                out[m.name] = tar.extractfile(m).read()
    return out


class SnapshotProvider:
    """httpx MockTransport stand-in for the snapshot host; records every requested URL."""

    def __init__(self) -> None:
        self.archives: Dict[str, bytes] = {}
        self.requested: list = []

    def add(self, url: str, entries: Dict[str, Entry]) -> None:
        self.archives[url] = build_zip(entries)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        if url in self.archives:
            return httpx.Response(200, content=self.archives[url], headers={"Content-Type": "application/zip"})
        return httpx.Response(404, text="Not Found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def provider() -> SnapshotProvider:
    p = SnapshotProvider()
    p.add("https://github.com/acme/widgets/archive/v2.zip", WIDGETS_V2)
    return p


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def settings(workspace_root: Path) -> Settings:
    return Settings(workspace_root=str(workspace_root), enforce_request_timeout=False)


@pytest.fixture
def make_pipeline(provider: SnapshotProvider, settings: Settings) -> Callable[..., Pipeline]:
    def _make(settings_override: Optional[Settings] = None, **kwargs) -> Pipeline:
        cfg = settings_override or settings
        kwargs.setdefault("fetcher", ArchiveFetcher(transport=provider.transport, chunk_size=1024))
        kwargs.setdefault("workspaces", WorkspaceManager(cfg.workspace_root))
        return Pipeline(settings=cfg, **kwargs)

    return _make


@pytest.fixture
def client(make_pipeline) -> TestClient:
    pipeline = make_pipeline()
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
