"""Initial schema: companies, trials, events, ai_analyses.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- companies ---
    op.create_table(
        "companies",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("tickers", ARRAY(sa.Text), nullable=False, server_default=sa.text("ARRAY[]::text[]")),
        sa.Column("market_cap", sa.Text),
        sa.Column("sector", sa.Text),
        sa.Column("website", sa.Text),
        sa.Column("logo_url", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index("idx_companies_name", "companies", ["name"])

    # --- trials ---
    op.create_table(
        "trials",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column("nct_id", sa.String(20), unique=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("phase", sa.Text),
        sa.Column("design", sa.Text),
        sa.Column("endpoints", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
        sa.Column("enrollment", sa.Integer),
        sa.Column("locations", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
        sa.Column("company_id", sa.String(36), sa.ForeignKey("companies.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column(
            "type",
            sa.String(30),
            sa.CheckConstraint(
                "type IN ('advisory_committee', 'pdufa', 'readout', 'nda_bla', 'phase_result')"
            ),
            nullable=False,
        ),
        sa.Column("date_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("source_links", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
        sa.Column("nct_id", sa.String(20)),
        sa.Column("company_id", sa.String(36), sa.ForeignKey("companies.id")),
        sa.Column("related_tickers", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
        sa.Column(
            "status",
            sa.String(10),
            sa.CheckConstraint("status IN ('upcoming', 'live', 'completed', 'cancelled')"),
            nullable=False,
            server_default="upcoming",
        ),
        sa.Column("therapeutic_area", sa.Text),
        sa.Column("description", sa.Text),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
    )
    op.create_index("idx_events_date_utc", "events", ["date_utc"])
    op.create_index("idx_events_company", "events", ["company_id"])
    op.create_index("idx_events_status", "events", ["status"])
    op.create_index("idx_events_nct_id", "events", ["nct_id"])

    # --- ai_analyses (one per event) ---
    op.create_table(
        "ai_analyses",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column(
            "event_id",
            sa.String(36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("summary", sa.Text, nullable=False),
        sa.Column("key_factors", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
        sa.Column("scenarios", JSONB, nullable=False),
        sa.Column(
            "confidence",
            sa.Float,
            sa.CheckConstraint("confidence >= 0 AND confidence <= 1"),
            nullable=False,
        ),
        sa.Column("model_version", sa.Text, nullable=False),
        sa.Column("sources_used", ARRAY(sa.Text), server_default=sa.text("ARRAY[]::text[]")),
    )


def downgrade() -> None:
    op.drop_table("ai_analyses")
    op.drop_table("events")
    op.drop_table("trials")
    op.drop_table("companies")
