"""Failure kinds raised by the forecast pipeline.

Each exception carries the ``error_code`` and HTTP ``status_code`` the API
layer renders, so routers never translate them by hand.
"""

from __future__ import annotations


class CatalystTrackerError(Exception):
    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotConfigured(CatalystTrackerError):
    """No generation credential was configured at startup."""

    error_code = "NOT_CONFIGURED"
    status_code = 503

    def __init__(self) -> None:
        super().__init__(
            "AI analysis is not configured. Set ANTHROPIC_API_KEY to enable it."
        )


class EventNotFound(CatalystTrackerError):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}", {"event_id": event_id})
        self.event_id = event_id


class AnalysisNotFound(CatalystTrackerError):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Analysis not found: {event_id}", {"event_id": event_id})
        self.event_id = event_id


class CompanyNotFound(CatalystTrackerError):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, company_id: str) -> None:
        super().__init__(f"Company not found: {company_id}", {"company_id": company_id})
        self.company_id = company_id


class ServiceUnavailable(CatalystTrackerError):
    """The model API was unreachable, timed out or returned an error status."""

    error_code = "UPSTREAM_ERROR"
    status_code = 500


class GenerationFailure(CatalystTrackerError):
    """The model answered but the payload is not a valid forecast."""

    error_code = "GENERATION_FAILED"
    status_code = 500


class DuplicateAnalysis(CatalystTrackerError):
    """An analysis already exists for the event. Absorbed by AnalysisService."""

    error_code = "ALREADY_EXISTS"
    status_code = 409

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Analysis already exists: {event_id}", {"event_id": event_id})
        self.event_id = event_id


class InvalidInput(CatalystTrackerError):
    error_code = "INVALID_INPUT"
    status_code = 400


class StorageFailure(CatalystTrackerError):
    """The analysis row could not be written or read back."""

    error_code = "STORAGE_FAILED"
    status_code = 500

    def __init__(self, message: str, event_id: str) -> None:
        super().__init__(message, {"event_id": event_id})
        self.event_id = event_id
