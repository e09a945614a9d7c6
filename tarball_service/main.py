# tarball_service/main.py
from __future__ import annotations

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tarball_service import __version__
from tarball_service.config import settings
from tarball_service.logging_conf import setup_logging, build_logging_config
from tarball_service.middleware import (
    add_cors,
    install_request_logging,
    add_correlation_middleware,
    add_error_handlers,
)
from tarball_service.routers import health_router, tarball_router

logger = logging.getLogger("tarball_service")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    if not settings.enforce_request_timeout:
        logger.info("Client timeout values are accepted but not enforced (ENFORCE_REQUEST_TIMEOUT=0)")
    yield
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    # Middlewares (last added runs first: correlation id is set before request logging)
    add_cors(app)
    install_request_logging(app)
    add_correlation_middleware(app)
    add_error_handlers(app)

    # Routers: health before the catch-all GET
    app.include_router(health_router)
    app.include_router(tarball_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    reload_flag = os.getenv("RELOAD", "0") in ("1", "true", "True")
    uvicorn.run(
        "tarball_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload_flag,
        log_config=build_logging_config(),
    )
