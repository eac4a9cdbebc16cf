"""Integration fixtures: a file-backed SQLite database (aiosqlite) per test.

SQLite stands in for PostgreSQL here; the ORM falls back to JSON columns for
arrays and JSONB on this dialect. A file (not :memory:) is used so that
concurrent sessions get separate connections and the unique index on
``ai_analyses.event_id`` arbitrates between them.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from catalyst_tracker.db.engine import create_db_engine, create_schema, create_session_factory
from catalyst_tracker.db.models import CompanyORM, EventORM, TrialORM

EVENT_DATE = datetime(2025, 3, 15, tzinfo=timezone.utc)


@pytest.fixture
async def engine(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'catalyst_test.db'}"
    engine = create_db_engine(url)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def seeded(session_factory):
    """Company c1 with event e1 (no trial) and event e2 linked to NCT01234567."""
    async with session_factory() as session:
        session.add(CompanyORM(id="c1", name="Acme Bio", tickers=["ACME"]))
        session.add(CompanyORM(id="c2", name="Zenith Gene", tickers=["ZNTH"]))
        await session.flush()
        session.add(
            TrialORM(
                id="t1",
                nct_id="NCT01234567",
                title="Drug Y in early disease",
                phase="Phase 2",
                endpoints=["Response rate"],
                enrollment=120,
                company_id="c2",
            )
        )
        session.add_all([
            EventORM(
                id="e1",
                title="PDUFA Date: Drug X",
                type="pdufa",
                date_utc=EVENT_DATE,
                company_id="c1",
                related_tickers=["ACME"],
                status="upcoming",
            ),
            EventORM(
                id="e2",
                title="Phase 2 Readout: Drug Y",
                type="readout",
                date_utc=datetime(2025, 5, 1, tzinfo=timezone.utc),
                nct_id="NCT01234567",
                company_id="c2",
                related_tickers=["ZNTH"],
                status="upcoming",
            ),
            EventORM(
                id="e3",
                title="AdCom: Drug Z",
                type="advisory_committee",
                date_utc=datetime(2025, 1, 10, tzinfo=timezone.utc),
                company_id="c1",
                status="completed",
            ),
        ])
        await session.commit()
