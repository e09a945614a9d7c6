# tarball_service/dependencies.py
from __future__ import annotations

import json
from functools import lru_cache

from fastapi import Request
from pydantic import ValidationError

from tarball_service.errors import RequestMalformed
from tarball_service.models import SnapshotRequestBody
from tarball_service.services import Pipeline, RequestInterpreter
from tarball_service.services.request_interpreter import INVALID_JSON


@lru_cache(maxsize=1)
def get_pipeline() -> Pipeline:
    return Pipeline()


@lru_cache(maxsize=1)
def get_interpreter() -> RequestInterpreter:
    return RequestInterpreter()


async def read_snapshot_body(request: Request) -> SnapshotRequestBody:
    """
    Decode the POST body as JSON whatever its Content-Type
    (curl -d sends form-urlencoded by default).
    """
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise RequestMalformed(f"body is not JSON: {e}", message=INVALID_JSON) from e
    if not isinstance(payload, dict):
        raise RequestMalformed(
            f"body is a JSON {type(payload).__name__}, not an object", message=INVALID_JSON
        )
    try:
        return SnapshotRequestBody.model_validate(payload)
    except ValidationError as e:
        raise RequestMalformed(f"body fields have wrong types: {e.errors()}", message=INVALID_JSON) from e
