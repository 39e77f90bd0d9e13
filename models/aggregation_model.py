from dataclasses import dataclass

import numpy as np

from models.consumption_model import analyze_window
from models.forecast_types import Confidence, Trend
from utils.ai_config import ANALYSIS_WINDOWS, TREND_WINDOW_DAYS, TREND_MULTIPLIERS
from utils.date_utils import window_start


@dataclass
class ConsumptionEstimate:
    adjusted_daily_consumption: float
    weighted_daily_consumption: float
    trend: Trend
    confidence: Confidence
    analyses: dict  # window days -> WindowAnalysis


def partition_window(movements, now, window_days: int):
    since = window_start(now, window_days)
    return [m for m in movements if since <= m.timestamp <= now]


def weighted_consumption(analyses, weights=None) -> float:
    """
    Blends the window averages, skipping windows whose confidence is none or
    very_low. Weights of the windows kept are renormalised to 1.
    """
    weights = weights or ANALYSIS_WINDOWS
    weighted = 0.0
    total_weight = 0.0
    for days, analysis in analyses.items():
        if analysis.confidence > Confidence.VERY_LOW:
            weight = weights.get(days, 0.1)
            weighted += analysis.average * weight
            total_weight += weight
    return weighted / total_weight if total_weight > 0 else 0.0


def trend_multiplier(trend: Trend) -> float:
    return TREND_MULTIPLIERS[trend.value]


def overall_confidence(analyses) -> Confidence:
    # every window counts here, including the ones left out of the blend
    if not analyses:
        return Confidence.NONE
    avg_score = float(np.mean([a.confidence.score for a in analyses.values()]))
    return Confidence.from_score(avg_score)


def aggregate(product_id, now, movement_repo) -> ConsumptionEstimate:
    """
    Multi-window consumption estimate for one product.

    The longest window is read once and the shorter windows are cut from it in
    memory.
    """
    longest = max(ANALYSIS_WINDOWS)
    history = movement_repo.outbound_since(product_id, window_start(now, longest))

    analyses = {
        days: analyze_window(partition_window(history, now, days), days)
        for days in sorted(ANALYSIS_WINDOWS)
    }

    blended = weighted_consumption(analyses)
    trend = analyses[TREND_WINDOW_DAYS].trend

    return ConsumptionEstimate(
        adjusted_daily_consumption=blended * trend_multiplier(trend),
        weighted_daily_consumption=blended,
        trend=trend,
        confidence=overall_confidence(analyses),
        analyses=analyses,
    )
