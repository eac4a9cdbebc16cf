"""Build the scenario-forecast prompt for one catalyst event."""

from __future__ import annotations

import json
from datetime import timedelta

import structlog

from catalyst_tracker.models.event import Company, Event, EventType, Trial
from catalyst_tracker.price_path import BASELINE_PRICE, PATH_POINTS

logger = structlog.get_logger()

EVENT_TYPE_LABELS = {
    EventType.ADVISORY_COMMITTEE: "FDA Advisory Committee meeting",
    EventType.PDUFA: "PDUFA regulatory decision date",
    EventType.READOUT: "Clinical data readout",
    EventType.NDA_BLA: "NDA/BLA filing submission",
    EventType.PHASE_RESULT: "Phase trial result",
}


class PromptBuilder:
    def build_forecast_prompt(
        self,
        event: Event,
        company: Company | None,
        trial: Trial | None,
    ) -> str:
        """Build XML-structured prompt asking for summary, key factors and
        Bull/Base/Bear scenarios with 30-day price paths."""
        parts = []

        # --- Event ---
        parts.append("<event>")
        parts.append(f"Title: {event.title}")
        parts.append(f"Type: {EVENT_TYPE_LABELS.get(event.type, event.type.value)}")
        parts.append(f"Date: {event.date_utc.date().isoformat()}")
        if company is not None:
            tickers = ", ".join(company.tickers) or "N/A"
            parts.append(f"Company: {company.name} (tickers: {tickers})")
            if company.market_cap:
                parts.append(f"Market Cap: {company.market_cap}")
        else:
            parts.append("Company: Unknown")
        parts.append(f"Therapeutic Area: {event.therapeutic_area or 'Not specified'}")
        if event.related_tickers:
            parts.append(f"Related Tickers: {', '.join(sorted(event.related_tickers))}")
        if event.description:
            parts.append(f"Description: {event.description}")
        parts.append("</event>")

        # --- Trial ---
        parts.append("<trial>")
        if trial is not None:
            parts.append(f"Registry ID: {trial.nct_id or 'N/A'}")
            parts.append(f"Phase: {trial.phase or 'Not specified'}")
            parts.append(f"Design: {trial.design or 'Not specified'}")
            endpoints = ", ".join(trial.endpoints) if trial.endpoints else "Not specified"
            parts.append(f"Endpoints: {endpoints}")
            if trial.enrollment is not None:
                parts.append(f"Enrollment: {trial.enrollment}")
        else:
            parts.append("  No linked trial")
        parts.append("</trial>")

        # --- Guidelines ---
        parts.append("<guidelines>")
        parts.append("- Bull: positive outcome, approval likely, strong efficacy")
        parts.append("- Base: moderate outcome, conditional approval or mixed results")
        parts.append("- Bear: negative outcome, trial failure, or significant concerns")
        parts.append("- Scenario probabilities must sum to 1.0")
        parts.append(
            f"- Every price path starts at {BASELINE_PRICE:.0f} on the event date and has "
            f"exactly {PATH_POINTS} daily points ending at the scenario's priceTarget"
        )
        parts.append("- Do not provide legal or medical advice; state limitations clearly")
        parts.append("</guidelines>")

        # --- Output Format ---
        start = event.date_utc.date()
        example_path = [
            {"date": start.isoformat(), "price": BASELINE_PRICE},
            {"date": (start + timedelta(days=1)).isoformat(), "price": 101.5},
            "...",
        ]
        parts.append("<output_format>")
        parts.append("Respond with a single JSON object:")
        parts.append(json.dumps({
            "summary": "2-3 sentence plain-English summary of the event's significance",
            "keyFactors": ["3-5 factors or endpoints to watch"],
            "scenarios": [
                {
                    "name": "Bull",
                    "prob": 0.35,
                    "narrative": "3-sentence rationale",
                    "priceTarget": 140.0,
                    "pricePath": example_path,
                },
                {"name": "Base", "prob": 0.45, "narrative": "...", "priceTarget": 105.0, "pricePath": ["..."]},
                {"name": "Bear", "prob": 0.20, "narrative": "...", "priceTarget": 60.0, "pricePath": ["..."]},
            ],
            "confidence": 0.7,
        }, indent=2))
        parts.append("</output_format>")

        prompt = "\n".join(parts)
        logger.debug("forecast_prompt_built", event_id=event.id, chars=len(prompt))
        return prompt
