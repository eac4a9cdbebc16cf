"""DB repositories: EventRepo, CompanyRepo, TrialRepo, AnalysisRepo.

Each entity has one explicit ORM <-> model mapping. Rows are snake_case on
disk; price-path dates are ISO strings inside the scenarios JSONB document and
``datetime.date`` values in process.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalyst_tracker.db.models import AiAnalysisORM, CompanyORM, EventORM, TrialORM
from catalyst_tracker.errors import DuplicateAnalysis, StorageFailure
from catalyst_tracker.models.analysis import AiAnalysis, PricePoint, Scenario
from catalyst_tracker.models.event import (
    Company,
    Event,
    EventFilters,
    EventStatus,
    EventType,
    Trial,
)

logger = structlog.get_logger()


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _orm_to_company(orm: CompanyORM) -> Company:
    return Company(
        id=orm.id,
        name=orm.name,
        tickers=list(orm.tickers or []),
        market_cap=orm.market_cap,
        sector=orm.sector,
        website=orm.website,
        logo_url=orm.logo_url,
    )


def _orm_to_trial(orm: TrialORM) -> Trial:
    return Trial(
        id=orm.id,
        nct_id=orm.nct_id,
        title=orm.title,
        phase=orm.phase,
        design=orm.design,
        endpoints=list(orm.endpoints or []),
        enrollment=orm.enrollment,
        locations=list(orm.locations or []),
        company_id=orm.company_id,
    )


def _orm_to_event(orm: EventORM) -> Event:
    return Event(
        id=orm.id,
        title=orm.title,
        type=EventType(orm.type),
        date_utc=_as_utc(orm.date_utc),
        nct_id=orm.nct_id,
        company_id=orm.company_id,
        related_tickers=list(orm.related_tickers or []),
        status=EventStatus(orm.status),
        therapeutic_area=orm.therapeutic_area,
        description=orm.description,
        source_links=list(orm.source_links or []),
        last_updated=_as_utc(orm.last_updated),
    )


def _scenario_to_doc(scenario: Scenario) -> dict:
    return {
        "name": scenario.name,
        "prob": scenario.prob,
        "narrative": scenario.narrative,
        "price_target": scenario.price_target,
        "price_path": [
            {"date": point.date.isoformat(), "price": point.price}
            for point in scenario.price_path
        ],
    }


def _doc_to_scenario(doc: dict) -> Scenario:
    return Scenario(
        name=doc["name"],
        prob=doc["prob"],
        narrative=doc["narrative"],
        price_target=doc["price_target"],
        price_path=[
            PricePoint(date=date.fromisoformat(point["date"]), price=point["price"])
            for point in doc.get("price_path", [])
        ],
    )


def _analysis_to_orm(analysis: AiAnalysis) -> AiAnalysisORM:
    return AiAnalysisORM(
        id=analysis.id,
        event_id=analysis.event_id,
        generated_at=analysis.generated_at,
        summary=analysis.summary,
        key_factors=list(analysis.key_factors),
        scenarios=[_scenario_to_doc(s) for s in analysis.scenarios],
        confidence=analysis.confidence,
        model_version=analysis.model_version,
        sources_used=list(analysis.sources_used),
    )


def _orm_to_analysis(orm: AiAnalysisORM) -> AiAnalysis:
    return AiAnalysis(
        id=orm.id,
        event_id=orm.event_id,
        generated_at=_as_utc(orm.generated_at),
        summary=orm.summary,
        key_factors=list(orm.key_factors or []),
        scenarios=[_doc_to_scenario(doc) for doc in orm.scenarios],
        confidence=orm.confidence,
        model_version=orm.model_version,
        sources_used=list(orm.sources_used or []),
    )


class EventRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, event_id: str) -> Event | None:
        """Get one event by id. Returns None if missing."""
        async with self.session_factory() as session:
            stmt = select(EventORM).where(EventORM.id == event_id)
            result = await session.execute(stmt)
            orm = result.scalar_one_or_none()
            if orm is None:
                return None
            return _orm_to_event(orm)

    async def list(self, filters: EventFilters | None = None) -> list[Event]:
        """List events matching filters, ordered by date_utc asc."""
        filters = filters or EventFilters()
        stmt = select(EventORM)
        if filters.company_id:
            stmt = stmt.where(EventORM.company_id == filters.company_id)
        if filters.statuses:
            stmt = stmt.where(EventORM.status.in_([s.value for s in filters.statuses]))
        if filters.types:
            stmt = stmt.where(EventORM.type.in_([t.value for t in filters.types]))
        if filters.date_from is not None:
            stmt = stmt.where(EventORM.date_utc >= filters.date_from)
        if filters.date_to is not None:
            stmt = stmt.where(EventORM.date_utc <= filters.date_to)
        stmt = stmt.order_by(EventORM.date_utc)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_orm_to_event(e) for e in result.scalars().all()]


class CompanyRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, company_id: str) -> Company | None:
        async with self.session_factory() as session:
            stmt = select(CompanyORM).where(CompanyORM.id == company_id)
            result = await session.execute(stmt)
            orm = result.scalar_one_or_none()
            if orm is None:
                return None
            return _orm_to_company(orm)

    async def list(self) -> list[Company]:
        async with self.session_factory() as session:
            stmt = select(CompanyORM).order_by(CompanyORM.name)
            result = await session.execute(stmt)
            return [_orm_to_company(c) for c in result.scalars().all()]


class TrialRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_by_nct_id(self, nct_id: str) -> Trial | None:
        """Resolve a trial by its ClinicalTrials.gov registry id."""
        async with self.session_factory() as session:
            stmt = select(TrialORM).where(TrialORM.nct_id == nct_id)
            result = await session.execute(stmt)
            orm = result.scalar_one_or_none()
            if orm is None:
                return None
            return _orm_to_trial(orm)


class AnalysisRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, event_id: str) -> AiAnalysis | None:
        """Get the analysis for an event. Returns None if none was stored."""
        async with self.session_factory() as session:
            stmt = select(AiAnalysisORM).where(AiAnalysisORM.event_id == event_id)
            result = await session.execute(stmt)
            orm = result.scalar_one_or_none()
            if orm is None:
                return None
            return _orm_to_analysis(orm)

    async def put(self, analysis: AiAnalysis) -> AiAnalysis:
        """Insert a new analysis.

        Raises DuplicateAnalysis when the unique index on event_id rejects the
        row. Any other integrity error (for example the event was deleted before
        the insert) is logged and raised as StorageFailure.
        """
        async with self.session_factory() as session:
            session.add(_analysis_to_orm(analysis))
            try:
                await session.flush()
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                stmt = select(AiAnalysisORM.id).where(
                    AiAnalysisORM.event_id == analysis.event_id
                )
                existing = (await session.execute(stmt)).scalar_one_or_none()
                if existing is None:
                    logger.error(
                        "analysis_save_failed",
                        event_id=analysis.event_id,
                        id=analysis.id,
                        error=str(e.orig),
                    )
                    raise StorageFailure(
                        f"Failed to store analysis for {analysis.event_id}",
                        analysis.event_id,
                    ) from e
                logger.info(
                    "analysis_duplicate_rejected",
                    event_id=analysis.event_id,
                    existing_id=existing,
                )
                raise DuplicateAnalysis(analysis.event_id) from e
            logger.info("analysis_saved", id=analysis.id, event_id=analysis.event_id)
            return analysis
