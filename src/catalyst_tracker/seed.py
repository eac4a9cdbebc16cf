"""Seed the database with sample biotech companies, trials and catalyst events.

Usage: python -m catalyst_tracker.seed
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalyst_tracker.config import Settings
from catalyst_tracker.db.engine import create_db_engine, create_session_factory
from catalyst_tracker.db.models import CompanyORM, EventORM, TrialORM
from catalyst_tracker.log_config import configure_logging

logger = structlog.get_logger()

COMPANIES = [
    {"name": "BioNova Therapeutics", "tickers": ["BNOV"], "market_cap": "$2.4B",
     "sector": "Oncology", "website": "https://bionova.example.com"},
    {"name": "GeneTech Solutions", "tickers": ["GTSOL"], "market_cap": "$5.8B",
     "sector": "Gene Therapy", "website": "https://genetech.example.com"},
    {"name": "NeuroPharm Inc", "tickers": ["NPHM"], "market_cap": "$1.2B",
     "sector": "Neurology", "website": "https://neuropharm.example.com"},
    {"name": "CardioLife Biotech", "tickers": ["CLBT"], "market_cap": "$3.6B",
     "sector": "Cardiovascular", "website": "https://cardiolife.example.com"},
]

TRIALS = [
    {"nct_id": "NCT05234567", "title": "BNV-401 vs. Standard of Care in Advanced Melanoma",
     "phase": "Phase 3", "design": "Randomized, open-label",
     "endpoints": ["Objective response rate", "Progression-free survival"],
     "enrollment": 612, "company": "BNOV"},
    {"nct_id": "NCT05345678", "title": "NP-5501 in Early Alzheimer's Disease",
     "phase": "Phase 3", "design": "Randomized, double-blind, placebo-controlled",
     "endpoints": ["CDR-SB change from baseline at 18 months", "Amyloid PET reduction"],
     "enrollment": 1795, "company": "NPHM"},
]

# (title, type, days from now, nct_id, ticker, therapeutic area, description)
EVENTS = [
    ("FDA Advisory Committee Meeting: BNV-401 for Advanced Melanoma", "advisory_committee", 7,
     "NCT05234567", "BNOV", "Oncology",
     "FDA Oncologic Drugs Advisory Committee will review BNV-401, a checkpoint inhibitor "
     "for advanced melanoma. Phase 3 trial showed 42% objective response rate."),
    ("PDUFA Date: GeneTech's GT-2890 Gene Therapy for SMA", "pdufa", 21,
     None, "GTSOL", "Rare Genetic Diseases",
     "FDA decision deadline for GT-2890, a one-time gene therapy for spinal muscular atrophy."),
    ("Phase 3 Data Readout: NP-5501 for Alzheimer's Disease", "readout", 35,
     "NCT05345678", "NPHM", "Neurology",
     "Topline results from the pivotal Phase 3 study of NP-5501 in early Alzheimer's disease."),
    ("BLA Submission: CL-118 for Heart Failure", "nda_bla", 60,
     None, "CLBT", "Cardiovascular",
     "CardioLife plans to submit a BLA for CL-118 in heart failure with reduced ejection fraction."),
]


async def seed(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert sample rows unless companies already exist. Returns events created."""
    async with session_factory() as session:
        count = (await session.execute(select(func.count(CompanyORM.id)))).scalar_one()
        if count:
            logger.info("seed_skipped", reason="companies already present", companies=count)
            return 0

        companies = {}
        for data in COMPANIES:
            orm = CompanyORM(**data)
            session.add(orm)
            companies[data["tickers"][0]] = orm
        await session.flush()

        for data in TRIALS:
            data = dict(data)
            ticker = data.pop("company")
            session.add(TrialORM(company_id=companies[ticker].id, **data))

        now = datetime.now(timezone.utc)
        for title, event_type, days, nct_id, ticker, area, description in EVENTS:
            session.add(
                EventORM(
                    title=title,
                    type=event_type,
                    date_utc=now + timedelta(days=days),
                    nct_id=nct_id,
                    company_id=companies[ticker].id,
                    related_tickers=[ticker],
                    status="upcoming",
                    therapeutic_area=area,
                    description=description,
                    source_links=[],
                )
            )
        await session.commit()

    logger.info("seed_complete", companies=len(COMPANIES), trials=len(TRIALS), events=len(EVENTS))
    return len(EVENTS)


async def main() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    engine = create_db_engine(settings.DATABASE_URL)
    try:
        await seed(create_session_factory(engine))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
