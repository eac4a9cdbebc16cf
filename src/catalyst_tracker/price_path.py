"""Fallback price paths for scenarios the model returned without one."""

from __future__ import annotations

import random
from datetime import date, timedelta

from catalyst_tracker.models.analysis import PricePoint

BASELINE_PRICE = 100.0
PATH_POINTS = 30
JITTER = 0.01


def synthesize_path(
    start: date,
    target_price: float,
    points: int = PATH_POINTS,
    rng: random.Random | None = None,
) -> list[PricePoint]:
    """Linear walk from BASELINE_PRICE to target_price, one point per calendar day.

    Day 1 is ``start``, day ``points`` is ``start + points - 1`` days. Each
    price gets uniform multiplicative noise of +/- JITTER.
    """
    rng = rng or random.Random()
    steps = max(points - 1, 1)
    path = []
    for i in range(points):
        progress = i / steps
        price = BASELINE_PRICE + (target_price - BASELINE_PRICE) * progress
        price *= 1 + rng.uniform(-JITTER, JITTER)
        path.append(
            PricePoint(
                date=start + timedelta(days=i),
                price=max(round(price, 2), 0.01),
            )
        )
    return path
