"""FileDeck FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filedeck import __version__
from filedeck.config import Settings, get_settings
from filedeck.errors import FileDeckError
from filedeck.services import build_services
from filedeck.services.disk_probe import DiskProbe

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    settings: Settings = app.state.settings
    services = app.state.services
    _setup_logging(settings)
    logger.info(
        "Services initialized (root=%s, probes=%s)",
        services.resolver.root, ", ".join(services.usage.probe_names) or "none",
    )
    logger.info(
        "FileDeck v%s started, listening on %s:%s",
        __version__, settings.host, settings.port,
    )
    try:
        yield
    finally:
        logger.info("FileDeck shutting down")


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for noisy in ("multipart", "python_multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


async def _file_error_handler(request: Request, exc: FileDeckError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    settings: Settings | None = None,
    probes: Sequence[DiskProbe] | None = None,
) -> FastAPI:
    """Application factory.

    ``settings`` and ``probes`` default to the environment configuration and
    the platform probe chain; tests pass their own.
    """
    from filedeck.api.routes import api_router

    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.services = build_services(settings, probes)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FileDeckError, _file_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def run(**kwargs: Any) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "filedeck.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.uvicorn_workers,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
