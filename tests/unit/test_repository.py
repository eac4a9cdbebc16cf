"""Unit tests for DB repositories: mock AsyncSession."""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalyst_tracker.db.models import AiAnalysisORM, EventORM
from catalyst_tracker.db.repository import (
    AnalysisRepository,
    EventRepository,
    TrialRepository,
    _analysis_to_orm,
    _orm_to_analysis,
    _orm_to_event,
)
from catalyst_tracker.errors import CatalystTrackerError, DuplicateAnalysis, StorageFailure
from catalyst_tracker.models.analysis import AiAnalysis
from catalyst_tracker.models.event import EventStatus, EventType


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_session():
    """Create a mock AsyncSession with context manager support."""
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def session_factory(mock_session):
    """async_sessionmaker.__call__() returns a context manager, not a coroutine."""
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=mock_session)
    ctx.__aexit__ = AsyncMock(return_value=False)

    factory = MagicMock()
    factory.return_value = ctx
    return factory


@pytest.fixture
def analysis(draft):
    return AiAnalysis(
        id="a1",
        event_id="e1",
        generated_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
        summary=draft.summary,
        key_factors=draft.key_factors,
        scenarios=draft.scenarios,
        confidence=draft.confidence,
        model_version="test-analysis-v1",
        sources_used=["clinicaltrials.gov"],
    )


def _scalar_result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT INTO ai_analyses", {}, Exception("UNIQUE constraint failed"))


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


class TestMapping:
    def test_analysis_round_trip(self, analysis):
        orm = _analysis_to_orm(analysis)
        assert orm.event_id == "e1"
        assert orm.scenarios[0]["name"] == "Bull"
        assert orm.scenarios[0]["price_path"][0]["date"] == "2025-03-15"

        restored = _orm_to_analysis(orm)
        assert restored == analysis
        assert isinstance(restored.scenarios[0].price_path[0].date, date)

    def test_naive_timestamps_read_as_utc(self, analysis):
        orm = _analysis_to_orm(analysis)
        orm.generated_at = datetime(2025, 3, 1, 12, 0)
        restored = _orm_to_analysis(orm)
        assert restored.generated_at.tzinfo is timezone.utc

    def test_event_mapping(self):
        orm = EventORM(
            id="e1",
            title="PDUFA Date: Drug X",
            type="pdufa",
            date_utc=datetime(2025, 3, 15),
            nct_id="NCT01234567",
            company_id="c1",
            related_tickers=["ACME"],
            status="upcoming",
            source_links=None,
        )
        event = _orm_to_event(orm)
        assert event.type is EventType.PDUFA
        assert event.status is EventStatus.UPCOMING
        assert event.date_utc.tzinfo is timezone.utc
        assert event.source_links == []


# ---------------------------------------------------------------------------
# AnalysisRepository
# ---------------------------------------------------------------------------


class TestAnalysisRepository:
    @pytest.fixture
    def repo(self, session_factory):
        return AnalysisRepository(session_factory)

    async def test_put_adds_and_commits(self, repo, mock_session, analysis):
        result = await repo.put(analysis)

        assert result is analysis
        mock_session.add.assert_called_once()
        added = mock_session.add.call_args[0][0]
        assert isinstance(added, AiAnalysisORM)
        assert added.id == "a1"
        mock_session.commit.assert_awaited_once()

    async def test_put_duplicate_raises(self, repo, mock_session, analysis):
        mock_session.flush = AsyncMock(side_effect=_integrity_error())
        mock_session.execute = AsyncMock(return_value=_scalar_result("a-existing"))

        with pytest.raises(DuplicateAnalysis) as exc_info:
            await repo.put(analysis)

        assert exc_info.value.event_id == "e1"
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_called()

    async def test_put_other_integrity_error_is_storage_failure(self, repo, mock_session, analysis):
        """A foreign-key failure (event deleted before the insert) is not a duplicate."""
        mock_session.flush = AsyncMock(side_effect=_integrity_error())
        mock_session.execute = AsyncMock(return_value=_scalar_result(None))

        with pytest.raises(StorageFailure) as exc_info:
            await repo.put(analysis)

        error = exc_info.value
        assert isinstance(error, CatalystTrackerError)
        assert not isinstance(error, DuplicateAnalysis)
        assert error.status_code == 500
        assert error.details == {"event_id": "e1"}
        assert isinstance(error.__cause__, IntegrityError)
        mock_session.rollback.assert_awaited_once()

    async def test_get_missing_returns_none(self, repo, mock_session):
        mock_session.execute = AsyncMock(return_value=_scalar_result(None))
        assert await repo.get("e1") is None

    async def test_get_maps_row(self, repo, mock_session, analysis):
        mock_session.execute = AsyncMock(return_value=_scalar_result(_analysis_to_orm(analysis)))
        result = await repo.get("e1")
        assert result.id == "a1"
        assert [s.name for s in result.scenarios] == ["Bull", "Base", "Bear"]


# ---------------------------------------------------------------------------
# EventRepository / TrialRepository
# ---------------------------------------------------------------------------


class TestEventRepository:
    async def test_get_missing_returns_none(self, session_factory, mock_session):
        mock_session.execute = AsyncMock(return_value=_scalar_result(None))
        assert await EventRepository(session_factory).get("nope") is None


class TestTrialRepository:
    async def test_get_by_nct_id_missing(self, session_factory, mock_session):
        mock_session.execute = AsyncMock(return_value=_scalar_result(None))
        assert await TrialRepository(session_factory).get_by_nct_id("NCT00000000") is None
