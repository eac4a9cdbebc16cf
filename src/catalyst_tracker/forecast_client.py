"""Anthropic AsyncClient wrapper that turns an event into a scenario forecast."""

from __future__ import annotations

import asyncio
import json
import math
import random
from dataclasses import dataclass
from datetime import date, timedelta

import anthropic
import structlog
from anthropic import AsyncAnthropic
from pydantic import ValidationError

from catalyst_tracker.config import Settings
from catalyst_tracker.errors import GenerationFailure, ServiceUnavailable
from catalyst_tracker.models.analysis import AnalysisDraft, PricePoint
from catalyst_tracker.models.event import Company, Event, Trial
from catalyst_tracker.price_path import PATH_POINTS, synthesize_path
from catalyst_tracker.prompt_builder import PromptBuilder

logger = structlog.get_logger()

DEFAULT_CONFIDENCE = 0.7

FORECAST_SYSTEM_PROMPT = """You are an expert biotech and pharmaceutical industry analyst
specializing in clinical trials, FDA approvals, and market forecasting.
Analyze the catalyst event and forecast Bull, Base and Bear outcomes for the stock.
Respond ONLY with a single JSON object matching the output_format."""


@dataclass(frozen=True)
class Parsed:
    draft: AnalysisDraft


@dataclass(frozen=True)
class ParseError:
    reason: str


ParseResult = Parsed | ParseError


class ForecastClient:
    def __init__(
        self,
        settings: Settings,
        client: AsyncAnthropic,
        prompt_builder: PromptBuilder | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.rng = rng or random.Random()

    async def generate(
        self,
        event: Event,
        company: Company | None = None,
        trial: Trial | None = None,
    ) -> AnalysisDraft:
        """Prompt the model, validate its JSON and back-fill missing price paths.

        Raises ServiceUnavailable if the call fails and GenerationFailure if
        the answer is not a valid forecast. Nothing is persisted here.
        """
        prompt = self.prompt_builder.build_forecast_prompt(event, company, trial)
        text = await self._call(prompt, event_id=event.id)

        result = self.parse_forecast(text, event.date_utc.date())
        if isinstance(result, ParseError):
            logger.warning(
                "forecast_parse_error",
                event_id=event.id,
                reason=result.reason,
                raw_text=text[:200],
            )
            raise GenerationFailure(f"Failed to parse AI analysis: {result.reason}")

        draft = result.draft
        total_prob = sum(s.prob for s in draft.scenarios)
        if not math.isclose(total_prob, 1.0, abs_tol=0.05):
            logger.warning("forecast_prob_sum_off", event_id=event.id, total=round(total_prob, 3))
        logger.info(
            "forecast_generated",
            event_id=event.id,
            confidence=draft.confidence,
            key_factors=len(draft.key_factors),
        )
        return draft

    async def _call(self, prompt: str, event_id: str = "") -> str:
        """Low-level Anthropic API call with timeout. No retries."""
        try:
            response = await asyncio.wait_for(
                self.client.messages.create(
                    model=self.settings.FORECAST_MODEL,
                    max_tokens=self.settings.FORECAST_MAX_TOKENS,
                    temperature=self.settings.FORECAST_TEMPERATURE,
                    system=FORECAST_SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self.settings.FORECAST_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "forecast_timeout",
                event_id=event_id,
                timeout=self.settings.FORECAST_TIMEOUT_SECONDS,
            )
            raise ServiceUnavailable(
                f"Forecast model timed out after {self.settings.FORECAST_TIMEOUT_SECONDS}s"
            ) from e
        except anthropic.APIError as e:
            logger.warning("forecast_api_error", event_id=event_id, error=str(e))
            raise ServiceUnavailable(f"Forecast model request failed: {e}") from e

        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning("forecast_truncated", event_id=event_id)
        text = response.content[0].text if response.content else ""
        logger.info(
            "forecast_call",
            event_id=event_id,
            model=self.settings.FORECAST_MODEL,
            chars=len(text),
        )
        return text

    def parse_forecast(self, text: str, event_date: date) -> ParseResult:
        """Validate the model's JSON into an AnalysisDraft.

        Summary, key factors and the three named scenarios are required.
        A price path that is missing, or is not PATH_POINTS daily points from
        the event date, is replaced with a synthesized one. Confidence is clamped.
        """
        if not text:
            return ParseError("empty response")

        data = self._extract_json(text)
        if not isinstance(data, dict):
            return ParseError("response is not a JSON object")

        scenarios = data.get("scenarios")
        if not isinstance(scenarios, list):
            return ParseError("scenarios must be a list")

        payload = dict(data)
        payload["confidence"] = self._clamp_confidence(data.get("confidence"))
        payload["scenarios"] = [
            {**s, "pricePath": s.get("pricePath") or []} if isinstance(s, dict) else s
            for s in scenarios
        ]

        try:
            draft = AnalysisDraft.model_validate(payload)
        except ValidationError as e:
            return ParseError(self._summarize_errors(e))

        for scenario in draft.scenarios:
            problem = self._path_problem(scenario.price_path, event_date)
            if problem is not None:
                supplied_points = len(scenario.price_path)
                scenario.price_path = synthesize_path(
                    event_date, scenario.price_target, rng=self.rng
                )
                logger.info(
                    "price_path_synthesized",
                    scenario=scenario.name,
                    reason=problem,
                    supplied_points=supplied_points,
                )
        return Parsed(draft)

    @staticmethod
    def _path_problem(path: list[PricePoint], event_date: date) -> str | None:
        """Why a supplied path must be replaced, or None if it is usable.

        A usable path has PATH_POINTS consecutive daily points from event_date.
        """
        if not path:
            return "missing"
        if len(path) != PATH_POINTS:
            return "wrong_length"
        if path[0].date != event_date:
            return "wrong_start_date"
        if any(b.date - a.date != timedelta(days=1) for a, b in zip(path, path[1:])):
            return "not_daily"
        return None

    @staticmethod
    def _clamp_confidence(value: object) -> float:
        """Clamp into [0, 1]; absent or unparsable falls back to DEFAULT_CONFIDENCE."""
        if value is None or isinstance(value, bool):
            return DEFAULT_CONFIDENCE
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIDENCE
        if math.isnan(confidence):
            return DEFAULT_CONFIDENCE
        return max(0.0, min(1.0, confidence))

    @staticmethod
    def _summarize_errors(error: ValidationError) -> str:
        parts = []
        for err in error.errors()[:5]:
            loc = ".".join(str(p) for p in err["loc"]) or "payload"
            parts.append(f"{loc}: {err['msg']}")
        return "; ".join(parts)

    @staticmethod
    def _extract_json(text: str) -> dict | None:
        """Try to extract a JSON object from text."""
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        try:
            start = text.index("{")
            end = text.rindex("}") + 1
            return json.loads(text[start:end])
        except (ValueError, json.JSONDecodeError):
            pass

        return None
