"""Scenario, AnalysisDraft, AiAnalysis Pydantic models."""

import datetime as dt
from typing import Literal

from pydantic import Field, model_validator

from catalyst_tracker.models.event import CamelModel

SCENARIO_NAMES = ("Bull", "Base", "Bear")


class PricePoint(CamelModel):
    date: dt.date
    price: float = Field(gt=0)


class Scenario(CamelModel):
    name: Literal["Bull", "Base", "Bear"]
    prob: float = Field(ge=0.0, le=1.0)
    narrative: str = Field(min_length=1)
    price_target: float = Field(gt=0)
    price_path: list[PricePoint] = []


class AnalysisDraft(CamelModel):
    summary: str = Field(min_length=1)
    key_factors: list[str] = []
    scenarios: list[Scenario]
    confidence: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _one_of_each_scenario(self) -> "AnalysisDraft":
        names = sorted(s.name for s in self.scenarios)
        if names != sorted(SCENARIO_NAMES):
            raise ValueError(
                f"scenarios must be exactly Bull, Base, Bear; got {[s.name for s in self.scenarios]}"
            )
        order = {name: i for i, name in enumerate(SCENARIO_NAMES)}
        self.scenarios.sort(key=lambda s: order[s.name])
        return self


class AiAnalysis(AnalysisDraft):
    id: str
    event_id: str
    generated_at: dt.datetime
    model_version: str
    sources_used: list[str] = []
