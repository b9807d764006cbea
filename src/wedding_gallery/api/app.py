"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from wedding_gallery.api.admin import router as admin_router
from wedding_gallery.api.analytics import router as analytics_router
from wedding_gallery.api.frames import router as frames_router
from wedding_gallery.api.gallery import router as gallery_router
from wedding_gallery.api.uploads import router as uploads_router
from wedding_gallery.app_logging import configure_logging
from wedding_gallery.containers import AppContainer
from wedding_gallery.errors import GalleryError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(
        request: Request, exc: GalleryError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message
            )
        body: dict[str, object] = {"success": False, "error": exc.message}
        if settings.environment == "local" and exc.__cause__ is not None:
            body["debug"] = _format_cause(exc.__cause__)
        return JSONResponse(status_code=exc.status_code, content=body)

    app.include_router(uploads_router)
    app.include_router(gallery_router)
    app.include_router(frames_router)
    app.include_router(analytics_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/status")
    async def api_status() -> dict[str, object]:
        """Report that the photo API is up."""
        return {
            "success": True,
            "status": "online",
            "message": "Photo API is operational",
            "timestamp": int(time.time() * 1000),
        }

    app.mount(
        "/photos",
        StaticFiles(directory=settings.photos_dir, check_dir=False),
        name="photos",
    )
    app.mount(
        "/thumbnails",
        StaticFiles(directory=settings.thumbnails_dir, check_dir=False),
        name="thumbnails",
    )
    app.mount(
        "/frames",
        StaticFiles(directory=settings.frames_dir, check_dir=False),
        name="frames",
    )
    return app


def _format_cause(cause: BaseException) -> str:
    message = str(cause).strip() or "no details"
    return f"{type(cause).__name__}: {message}"
