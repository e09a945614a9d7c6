# tarball_service/config.py
from __future__ import annotations
import os
from typing import List, Optional
from pydantic import BaseModel


class Settings(BaseModel):
    # App
    app_name: str = "Repo Tarball Service"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Service identity (optional, useful in logs)
    service_name: str = os.getenv("SERVICE_NAME", "tarball-service")

    # Workspaces: one mkdtemp() per request below this root (None -> system temp dir)
    workspace_root: Optional[str] = os.getenv("WORKSPACE_ROOT") or None

    # Snapshot download
    download_chunk_size: int = int(os.getenv("DOWNLOAD_CHUNK_SIZE", str(1024 * 1024)))
    # Per-operation httpx timeout (connect/read/write), not a bound on the whole download
    http_client_timeout_seconds: float = float(os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS", "30"))

    # Request defaults
    default_ref: str = "main"
    default_get_timeout: int = 120
    default_post_timeout: int = 20

    # Off: the caller's timeout is accepted and logged only
    enforce_request_timeout: bool = os.getenv("ENFORCE_REQUEST_TIMEOUT", "0") in ("1", "true", "True")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    cors_origins: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()
