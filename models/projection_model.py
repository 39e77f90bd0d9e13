from dataclasses import dataclass
from typing import Optional

import numpy as np

from models.forecast_types import ForecastPoint
from utils.ai_config import MAX_FORECAST_POINTS, PROJECTION_VARIANCE
from utils.date_utils import day_offset, round_half_up


@dataclass
class StockProjection:
    points: list  # at most MAX_FORECAST_POINTS
    stock_out: Optional[ForecastPoint]
    simulated_days: int


def default_rng(seed=None) -> np.random.Generator:
    return np.random.default_rng(seed)


def simulate(current_stock, daily_consumption, forecast_days, now, rng):
    """
    Yields one ForecastPoint per day until the horizon is reached or the
    running stock (before noise) hits zero; that last day is still yielded.
    """
    variance = daily_consumption * PROJECTION_VARIANCE
    expected = round_half_up(daily_consumption)
    running = float(current_stock)

    for day in range(1, forecast_days + 1):
        running -= daily_consumption
        noise = rng.uniform(-variance / 2, variance / 2)
        yield ForecastPoint(
            day=day,
            date=day_offset(now, day),
            predicted_stock=max(0, round_half_up(running + noise)),
            expected_consumption=expected,
        )
        if running <= 0:
            break


def project(current_stock, daily_consumption, forecast_days, now, rng=None) -> StockProjection:
    rng = rng if rng is not None else default_rng()
    points = list(simulate(current_stock, daily_consumption, forecast_days, now, rng))
    stock_out = next((p for p in points if p.predicted_stock <= 0), None)
    return StockProjection(
        points=points[:MAX_FORECAST_POINTS],
        stock_out=stock_out,
        simulated_days=len(points),
    )
