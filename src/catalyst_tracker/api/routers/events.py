"""Events router"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from catalyst_tracker.api.dependencies import get_event_repo
from catalyst_tracker.db.repository import EventRepository
from catalyst_tracker.errors import EventNotFound, InvalidInput
from catalyst_tracker.models.event import Event, EventFilters, EventStatus, EventType

router = APIRouter(prefix="/events", tags=["events"])


def _parse_date(value: str, field: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidInput(f"Invalid date format for {field}: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_csv(value: str | None, enum_cls, field: str) -> list:
    if not value:
        return []
    try:
        return [enum_cls(v.strip()) for v in value.split(",") if v.strip()]
    except ValueError as e:
        raise InvalidInput(f"Invalid {field}: {value}") from e


@router.get("", response_model=list[Event], summary="List catalyst events")
async def list_events(
    company_id: Optional[str] = Query(None, alias="companyId"),
    status: Optional[str] = None,
    types: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    repo: EventRepository = Depends(get_event_repo),
):
    """Events ordered by date. status and types take comma-separated values;
    companyId, dateFrom and dateTo are camelCase like the response bodies."""
    filters = EventFilters(
        company_id=company_id,
        statuses=_parse_csv(status, EventStatus, "status"),
        types=_parse_csv(types, EventType, "types"),
        date_from=_parse_date(date_from, "dateFrom") if date_from else None,
        date_to=_parse_date(date_to, "dateTo") if date_to else None,
    )
    return await repo.list(filters)


@router.get("/{event_id}", response_model=Event, summary="Get one event")
async def get_event(event_id: str, repo: EventRepository = Depends(get_event_repo)):
    event = await repo.get(event_id)
    if event is None:
        raise EventNotFound(event_id)
    return event
