"""FastAPI application factory."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalyst_tracker.analysis_service import AnalysisService
from catalyst_tracker.api.routers import analyses, companies, events
from catalyst_tracker.api.schemas import ErrorResponse, HealthResponse
from catalyst_tracker.config import Settings
from catalyst_tracker.errors import CatalystTrackerError

logger = structlog.get_logger()


def create_app(
    settings: Settings,
    analysis_service: AnalysisService,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager] | None = None,
) -> FastAPI:
    app = FastAPI(title="Catalyst Tracker API", lifespan=lifespan)
    app.state.analysis_service = analysis_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalystTrackerError)
    async def catalyst_tracker_exception_handler(request: Request, exc: CatalystTrackerError):
        logger.warning(
            "request_failed",
            path=request.url.path,
            error_code=exc.error_code,
            status_code=exc.status_code,
            error=exc.message,
        )
        body = ErrorResponse(
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(forecasts_enabled=analysis_service.configured)

    app.include_router(analyses.router, prefix="/api")
    app.include_router(events.router, prefix="/api")
    app.include_router(companies.router, prefix="/api")
    return app
