import numpy as np

from models.forecast_types import Confidence, Trend, WindowAnalysis
from utils.ai_config import TREND_INCREASING_RATIO, TREND_DECREASING_RATIO


def calculate_trend(movements) -> Trend:
    """
    Compares the mean quantity of the second half of the (ordered) movements
    with the first half.
    """
    if len(movements) < 2:
        return Trend.STABLE

    midpoint = len(movements) // 2
    first_half_avg = float(np.mean([m.quantity for m in movements[:midpoint]]))
    second_half_avg = float(np.mean([m.quantity for m in movements[midpoint:]]))

    if first_half_avg == 0:
        return Trend.INCREASING if second_half_avg > 0 else Trend.STABLE

    ratio = second_half_avg / first_half_avg
    if ratio > TREND_INCREASING_RATIO:
        return Trend.INCREASING
    if ratio < TREND_DECREASING_RATIO:
        return Trend.DECREASING
    return Trend.STABLE


def calculate_confidence(movements, window_days: int) -> Confidence:
    n = len(movements)
    if n == 0:
        return Confidence.NONE
    if n < 3:
        return Confidence.VERY_LOW
    if n < 7:
        return Confidence.LOW
    if n < 14:
        return Confidence.MEDIUM
    if window_days >= 30:
        return Confidence.HIGH
    return Confidence.MEDIUM


def analyze_window(movements, window_days: int) -> WindowAnalysis:
    """
    Consumption statistics for one trailing window.

    `movements` are the outbound movements inside the window, ascending by
    timestamp. The daily average spreads the total over the whole window, not
    over the number of movements.

    An empty window returns confidence LOW here, not the NONE that
    calculate_confidence() gives for no data.
    """
    if not movements:
        return WindowAnalysis(
            window_days=window_days,
            average=0.0,
            total_consumption=0.0,
            movement_count=0,
            trend=Trend.STABLE,
            confidence=Confidence.LOW,
        )

    total = float(sum(m.quantity for m in movements))
    return WindowAnalysis(
        window_days=window_days,
        average=total / window_days,
        total_consumption=total,
        movement_count=len(movements),
        trend=calculate_trend(movements),
        confidence=calculate_confidence(movements, window_days),
    )
