"""Event, Company, Trial Pydantic models."""

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventType(str, enum.Enum):
    ADVISORY_COMMITTEE = "advisory_committee"
    PDUFA = "pdufa"
    READOUT = "readout"
    NDA_BLA = "nda_bla"
    PHASE_RESULT = "phase_result"


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Company(CamelModel):
    id: str
    name: str
    tickers: list[str] = []
    market_cap: str | None = None
    sector: str | None = None
    website: str | None = None
    logo_url: str | None = None


class Trial(CamelModel):
    id: str
    nct_id: str | None = None
    title: str = ""
    phase: str | None = None
    design: str | None = None
    endpoints: list[str] = []
    enrollment: int | None = None
    locations: list[str] = []
    company_id: str | None = None


class Event(CamelModel):
    id: str
    title: str
    type: EventType
    date_utc: datetime
    nct_id: str | None = None
    company_id: str | None = None
    related_tickers: list[str] = []
    status: EventStatus = EventStatus.UPCOMING
    therapeutic_area: str | None = None
    description: str | None = None
    source_links: list[str] = []
    last_updated: datetime | None = None


class EventFilters(BaseModel):
    company_id: str | None = None
    statuses: list[EventStatus] = []
    types: list[EventType] = []
    date_from: datetime | None = None
    date_to: datetime | None = None
