from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from haven.api.v1.router import router as api_v1_router
from haven.config.logging import setup_logging
from haven.config.settings import Settings, get_settings
from haven.core.exceptions import BaseAppException, StoreError
from haven.core.middleware import register_middlewares

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error(f"Record store failure on {request.url.path}: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "environment": settings.ENVIRONMENT}

    return app
