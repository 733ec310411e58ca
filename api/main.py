"""FastAPI application serving the video site and its legacy redirects."""

import asyncio
import logging
from contextlib import asynccontextmanager

import fastapi
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from core.config import get_settings
from core.logger import configure_logging
from core.redirects import LegacyVideoRedirectMiddleware
from routes import health_router
from services.redirect_service import (
    get_redirect_resolver,
    resolve_legacy_video_redirect,
)

configure_logging()
logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unhandled exceptions."""
    logger.exception(
        "unhandled.exception",
        extra={
            "exc_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again."},
    )


async def _preload_videos() -> None:
    """Build the lookup table in the background after the app starts serving."""
    try:
        await get_redirect_resolver().ensure_loaded()
        logger.info("video_data.preloaded")
    except Exception:
        # The first legacy request retries the load.
        logger.warning("video_data.preload.failed", exc_info=True)


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    """Preload the video table at startup, stop the preload on shutdown."""
    preload_task: asyncio.Task[None] | None = None
    if get_settings().preload_videos:
        preload_task = asyncio.create_task(_preload_videos())

    try:
        yield
    finally:
        if preload_task is not None and not preload_task.done():
            preload_task.cancel()
            try:
                await preload_task
            except asyncio.CancelledError:
                pass


_settings = get_settings()

app = fastapi.FastAPI(
    title="Video Redirects",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if _settings.enable_docs or _settings.debug else None,
    redoc_url="/redoc" if _settings.enable_docs or _settings.debug else None,
    openapi_url=("/openapi.json" if _settings.enable_docs or _settings.debug else None),
)

app.add_exception_handler(Exception, global_exception_handler)

# Outermost, so legacy URLs never reach routing or static files
app.add_middleware(
    LegacyVideoRedirectMiddleware, resolver=resolve_legacy_video_redirect
)

app.include_router(health_router)

# Must be last to avoid shadowing the health routes
_site_dir = _settings.site_dir_path
if _site_dir.exists():
    app.mount("/", StaticFiles(directory=str(_site_dir), html=True), name="site")
