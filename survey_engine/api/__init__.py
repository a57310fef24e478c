"""
REST API Layer for the survey engine.

Provides:
- FastAPI application with CORS middleware
- Wizard endpoints under /api/v1
- Exception handlers mapping engine errors to envelope responses
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_engine import __version__
from survey_engine.api.routes import router
from survey_engine.api.schemas import error_response
from survey_engine.config.survey import load_settings
from survey_engine.lib.errors import INTERNAL_ERROR, INVALID_STATE, VALIDATION_ERROR, http_status_for
from survey_engine.lib.exceptions import InvalidStateError
from survey_engine.lib.exceptions import ValidationError as SurveyValidationError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Includes:
    - CORS middleware with configurable origins via SURVEY_CORS_ORIGINS
    - Exception handlers (invalid state -> 409, invalid input -> 422)
    - API v1 router
    - Root-level health check
    - Production: /docs and /redoc disabled

    Returns:
        Configured FastAPI application instance.
    """
    settings = load_settings()

    app = FastAPI(
        title="Engagement Survey Engine",
        description="Resumable multi-section survey wizard",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    @app.exception_handler(InvalidStateError)
    async def invalid_state_handler(request: Request, exc: InvalidStateError) -> JSONResponse:
        logger.warning(
            "Invalid state call on %s %s: %s", request.method, request.url.path, exc,
        )
        return JSONResponse(
            status_code=http_status_for(INVALID_STATE),
            content=error_response(
                INVALID_STATE,
                str(exc),
                details={"operation": exc.operation, "section": exc.section},
            ),
        )

    @app.exception_handler(SurveyValidationError)
    async def validation_handler(request: Request, exc: SurveyValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=http_status_for(VALIDATION_ERROR),
            content=error_response(VALIDATION_ERROR, str(exc)),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, dict) else {"code": INTERNAL_ERROR, "message": str(exc.detail)}
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "data": None, "error": detail},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=http_status_for(INTERNAL_ERROR), content=error_response(INTERNAL_ERROR))

    if settings.is_production and "*" in settings.cors_origins:
        raise ValueError(
            "SURVEY_CORS_ORIGINS contains wildcard '*' which is forbidden in production. "
            "Specify explicit origins instead."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    )

    if settings.cors_origins:
        logger.info("CORS enabled for origins: %s", list(settings.cors_origins))

    app.include_router(router)

    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        """Root health check for infrastructure probes."""
        return {"status": "ok"}

    return app


__all__ = ["create_app", "router"]
