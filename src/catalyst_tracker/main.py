"""Entry point: wire repositories, forecast client and API, then serve."""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from anthropic import AsyncAnthropic
from fastapi import FastAPI

from catalyst_tracker.analysis_service import AnalysisService
from catalyst_tracker.api.app import create_app
from catalyst_tracker.config import Settings
from catalyst_tracker.db.engine import create_db_engine, create_session_factory
from catalyst_tracker.db.repository import (
    AnalysisRepository,
    CompanyRepository,
    EventRepository,
    TrialRepository,
)
from catalyst_tracker.forecast_client import ForecastClient
from catalyst_tracker.log_config import configure_logging

logger = structlog.get_logger()


def build_app(settings: Settings) -> FastAPI:
    engine = create_db_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )
    session_factory = create_session_factory(engine)

    forecast_client = None
    if settings.forecasts_enabled:
        forecast_client = ForecastClient(
            settings=settings,
            client=AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY),
        )
    else:
        logger.warning("forecasts_disabled", reason="ANTHROPIC_API_KEY not set")

    service = AnalysisService(
        analysis_repo=AnalysisRepository(session_factory),
        event_repo=EventRepository(session_factory),
        company_repo=CompanyRepository(session_factory),
        trial_repo=TrialRepository(session_factory),
        forecast_client=forecast_client,
        model_version=settings.MODEL_VERSION_TAG,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("api_started", forecasts_enabled=service.configured)
        try:
            yield
        finally:
            if forecast_client is not None:
                await forecast_client.client.close()
            await engine.dispose()
            logger.info("shutdown_complete")

    return create_app(settings, service, lifespan=lifespan)


def main() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    app = build_app(settings)
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT, log_config=None)


if __name__ == "__main__":
    main()
