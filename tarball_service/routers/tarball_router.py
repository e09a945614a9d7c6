# tarball_service/routers/tarball_router.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from starlette.responses import StreamingResponse

from tarball_service.dependencies import get_interpreter, get_pipeline, read_snapshot_body
from tarball_service.models import SnapshotRequestBody
from tarball_service.services import Pipeline, RequestInterpreter

router = APIRouter(tags=["tarball"])

# Plain `def` endpoints: FastAPI runs each call on its worker threadpool, so a
# request's blocking download/extract/repack never stalls the event loop.


@router.post("/", response_class=StreamingResponse)
def fetch_by_body(
    payload: SnapshotRequestBody = Depends(read_snapshot_body),
    pipeline: Pipeline = Depends(get_pipeline),
    interpreter: RequestInterpreter = Depends(get_interpreter),
):
    return pipeline.run(interpreter.from_body(payload))


@router.get("/{full_path:path}", response_class=StreamingResponse)
def fetch_by_path(
    full_path: str,
    ref: Optional[str] = Query(default=None, description="Branch, tag, or commit (default: main)"),
    timeout: Optional[str] = Query(default=None, description="Seconds (default: 120)"),
    pipeline: Pipeline = Depends(get_pipeline),
    interpreter: RequestInterpreter = Depends(get_interpreter),
):
    return pipeline.run(interpreter.from_path(full_path, ref=ref, timeout=timeout))
