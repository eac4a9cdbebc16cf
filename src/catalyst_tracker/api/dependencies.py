"""FastAPI dependencies resolving components stored on app.state."""

from fastapi import Request

from catalyst_tracker.analysis_service import AnalysisService
from catalyst_tracker.db.repository import CompanyRepository, EventRepository


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_event_repo(request: Request) -> EventRepository:
    return request.app.state.analysis_service.event_repo


def get_company_repo(request: Request) -> CompanyRepository:
    return request.app.state.analysis_service.company_repo
