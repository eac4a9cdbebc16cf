"""SQLAlchemy ORM models for companies, trials, events and AI analyses."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    ARRAY,
    JSON,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Native types on PostgreSQL; JSON on SQLite for the in-memory test engine.
StringArray = ARRAY(Text).with_variant(JSON(), "sqlite")
JSONDocument = JSONB().with_variant(JSON(), "sqlite")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CompanyORM(Base):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    tickers: Mapped[list[str]] = mapped_column(StringArray, nullable=False, default=list)
    market_cap: Mapped[str | None] = mapped_column(Text)
    sector: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(Text)
    logo_url: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("idx_companies_name", "name"),)


class TrialORM(Base):
    __tablename__ = "trials"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    nct_id: Mapped[str | None] = mapped_column(String(20), unique=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    phase: Mapped[str | None] = mapped_column(Text)
    design: Mapped[str | None] = mapped_column(Text)
    endpoints: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
    enrollment: Mapped[int | None] = mapped_column(Integer)
    locations: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
    company_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("companies.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class EventORM(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(30),
        CheckConstraint(
            "type IN ('advisory_committee', 'pdufa', 'readout', 'nda_bla', 'phase_result')"
        ),
        nullable=False,
    )
    date_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    source_links: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
    nct_id: Mapped[str | None] = mapped_column(String(20))
    company_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("companies.id"))
    related_tickers: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
    status: Mapped[str] = mapped_column(
        String(10),
        CheckConstraint("status IN ('upcoming', 'live', 'completed', 'cancelled')"),
        nullable=False,
        default="upcoming",
    )
    therapeutic_area: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("idx_events_date_utc", "date_utc"),
        Index("idx_events_company", "company_id"),
        Index("idx_events_status", "status"),
        Index("idx_events_nct_id", "nct_id"),
    )


class AiAnalysisORM(Base):
    __tablename__ = "ai_analyses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    key_factors: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
    scenarios: Mapped[list[dict]] = mapped_column(JSONDocument, nullable=False)
    confidence: Mapped[float] = mapped_column(
        Float,
        CheckConstraint("confidence >= 0 AND confidence <= 1"),
        nullable=False,
    )
    model_version: Mapped[str] = mapped_column(Text, nullable=False)
    sources_used: Mapped[list[str] | None] = mapped_column(StringArray, default=list)
