"""dirserve FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware

from dirserve import __version__
from dirserve.config import Settings, get_settings
from dirserve.services.errors import FileStatusError

logger = logging.getLogger(__name__)


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def _file_status_error_handler(request: Request, exc: FileStatusError):
    """Log the underlying OS error, then answer like any HTTPException."""
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %r", request.method, request.scope["path"], exc.status_code, exc.error)
    else:
        logger.debug("%s %s -> %s: %r", request.method, request.scope["path"], exc.status_code, exc.error)
    return await http_exception_handler(request, exc)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    from dirserve.api.routes import api_router, browse

    settings = settings or get_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        """Startup / shutdown lifecycle."""
        _setup_logging(settings)

        if not Path(settings.root).is_dir():
            logger.warning("Served root %s is not a directory, every request will fail", settings.root)

        logger.info(
            "dirserve v%s serving %s at %s/, listening on %s:%s",
            __version__, settings.root, settings.base_url, settings.host, settings.port,
        )
        yield
        logger.info("dirserve shutting down")

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FileStatusError, _file_status_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)
    # Catch-all file routes go last so they never shadow the API
    app.include_router(browse.router, prefix=settings.base_url, tags=["files"])

    return app


app = create_app()


def run(**kwargs: Any) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dirserve.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.uvicorn_workers,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
