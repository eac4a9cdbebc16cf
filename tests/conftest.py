"""Shared fixtures: settings, sample event/company/trial, mocked Anthropic client."""

from __future__ import annotations

import json
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from catalyst_tracker.config import Settings
from catalyst_tracker.models.analysis import AnalysisDraft
from catalyst_tracker.models.event import Company, Event, EventType, Trial
from tests.factories import EVENT_DATE, make_path, make_payload, make_response


@pytest.fixture
def settings():
    return Settings(
        ANTHROPIC_API_KEY="test-key",
        FORECAST_MODEL="claude-sonnet-4-5",
        FORECAST_MAX_TOKENS=8192,
        FORECAST_TIMEOUT_SECONDS=30,
        MODEL_VERSION_TAG="test-analysis-v1",
    )


@pytest.fixture
def event():
    return Event(
        id="e1",
        title="PDUFA Date: Drug X",
        type=EventType.PDUFA,
        date_utc=EVENT_DATE,
        company_id="c1",
        related_tickers=["ACME"],
        therapeutic_area="Oncology",
    )


@pytest.fixture
def company():
    return Company(id="c1", name="Acme Bio", tickers=["ACME"])


@pytest.fixture
def trial():
    return Trial(
        id="t1",
        nct_id="NCT01234567",
        title="Drug X in relapsed disease",
        phase="Phase 3",
        design="Randomized, double-blind",
        endpoints=["Overall survival", "Progression-free survival"],
        enrollment=420,
    )


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def payload_text(payload):
    return json.dumps(payload)


@pytest.fixture
def anthropic_client(payload_text):
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=make_response(payload_text))
    return client


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def draft(payload):
    """A fully populated AnalysisDraft (every scenario has a path)."""
    data = dict(payload)
    data["scenarios"] = [
        {**s, "pricePath": s["pricePath"] or make_path(EVENT_DATE.date(), 100, s["priceTarget"])}
        for s in payload["scenarios"]
    ]
    return AnalysisDraft.model_validate(data)
