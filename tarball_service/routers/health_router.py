from __future__ import annotations
from fastapi import APIRouter

from tarball_service.config import settings

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
def health():
    return {"status": "ok", "service": settings.service_name}
