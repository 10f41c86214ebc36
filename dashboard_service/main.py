# Dashboard Service - Main Application
"""
FastAPI application for Dashboard Service.
Serves developer productivity analytics to the dashboard frontend.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashboard_service.config import Settings, get_settings
from dashboard_service.errors import APIError, InternalServerError, InvalidParametersError
from dashboard_service.routers import (
    activity_router,
    prompts_router,
    subscriptions_router,
    trends_router,
)
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Service settings (defaults to the environment)
        store: Record store; a DynamoDB store is created on first request if omitted
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        logger.info(f"Starting {settings.service_name} v{settings.service_version}")
        if settings.bypass_auth:
            logger.warning("Authorization checks are bypassed")

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.service_name}")

    app = FastAPI(
        title=settings.service_name,
        version=settings.service_version,
        description="Developer productivity analytics over activity, prompt and subscription logs",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = InvalidParametersError(f"Invalid request parameters: {exc.errors()}")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        error = InternalServerError("Internal server error")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": settings.service_version,
        }

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "docs": "/docs",
            "health": "/health"
        }

    # Include routers
    app.include_router(activity_router, prefix="/api")
    app.include_router(trends_router, prefix="/api")
    app.include_router(prompts_router, prefix="/api")
    app.include_router(subscriptions_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "dashboard_service.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug
    )
