"""Read and generate-or-fetch for per-event AI analyses."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from catalyst_tracker.db.repository import (
    AnalysisRepository,
    CompanyRepository,
    EventRepository,
    TrialRepository,
)
from catalyst_tracker.errors import (
    AnalysisNotFound,
    CatalystTrackerError,
    DuplicateAnalysis,
    EventNotFound,
    NotConfigured,
    StorageFailure,
)
from catalyst_tracker.forecast_client import ForecastClient
from catalyst_tracker.models.analysis import AiAnalysis

logger = structlog.get_logger()

SOURCES_USED = ["clinicaltrials.gov", "fda.gov", "event_metadata"]


class AnalysisService:
    def __init__(
        self,
        analysis_repo: AnalysisRepository,
        event_repo: EventRepository,
        company_repo: CompanyRepository,
        trial_repo: TrialRepository,
        forecast_client: ForecastClient | None,
        model_version: str,
    ) -> None:
        self.analysis_repo = analysis_repo
        self.event_repo = event_repo
        self.company_repo = company_repo
        self.trial_repo = trial_repo
        self.forecast_client = forecast_client
        self.model_version = model_version

    @property
    def configured(self) -> bool:
        return self.forecast_client is not None

    async def get_analysis(self, event_id: str) -> AiAnalysis:
        analysis = await self.analysis_repo.get(event_id)
        if analysis is None:
            raise AnalysisNotFound(event_id)
        return analysis

    async def generate_or_fetch(self, event_id: str) -> AiAnalysis:
        """Return the stored analysis, generating and storing it on first request.

        An event never gets a second analysis. When two requests race, the
        unique index decides the winner and the loser returns the winner's row.
        """
        existing = await self.analysis_repo.get(event_id)
        if existing is not None:
            logger.info("analysis_cache_hit", event_id=event_id, id=existing.id)
            return existing

        if self.forecast_client is None:
            logger.warning("analysis_not_configured", event_id=event_id)
            raise NotConfigured()

        event = await self.event_repo.get(event_id)
        if event is None:
            logger.warning("analysis_event_not_found", event_id=event_id)
            raise EventNotFound(event_id)

        company = await self.company_repo.get(event.company_id) if event.company_id else None
        trial = await self.trial_repo.get_by_nct_id(event.nct_id) if event.nct_id else None

        try:
            draft = await self.forecast_client.generate(event, company, trial)
        except CatalystTrackerError as e:
            logger.error(
                "analysis_generation_failed",
                event_id=event_id,
                kind=type(e).__name__,
                error=e.message,
            )
            raise

        analysis = AiAnalysis(
            id=str(uuid.uuid4()),
            event_id=event_id,
            generated_at=datetime.now(timezone.utc),
            summary=draft.summary,
            key_factors=draft.key_factors,
            scenarios=draft.scenarios,
            confidence=draft.confidence,
            model_version=self.model_version,
            sources_used=list(SOURCES_USED),
        )

        try:
            stored = await self.analysis_repo.put(analysis)
        except DuplicateAnalysis as e:
            winner = await self.analysis_repo.get(event_id)
            if winner is None:
                # The winning row vanished between insert and re-read.
                logger.error("analysis_winner_missing", event_id=event_id)
                raise StorageFailure(f"Failed to store analysis for {event_id}", event_id) from e
            logger.info("analysis_race_lost", event_id=event_id, id=winner.id)
            return winner

        logger.info(
            "analysis_generated",
            event_id=event_id,
            id=stored.id,
            confidence=stored.confidence,
        )
        return stored
