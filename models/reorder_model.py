from models.forecast_types import ReorderSuggestion, Urgency
from utils.ai_config import (
    LEAD_TIME_DAYS, SAFETY_STOCK_DAYS, ORDER_COVERAGE_DAYS, HIGH_URGENCY_DAYS, MEDIUM_URGENCY_DAYS
)
from utils.date_utils import round_half_up


def urgency_for(stock_out_day: int | None) -> Urgency:
    if stock_out_day is None:
        return Urgency.LOW
    if stock_out_day <= HIGH_URGENCY_DAYS:
        return Urgency.HIGH
    if stock_out_day <= MEDIUM_URGENCY_DAYS:
        return Urgency.MEDIUM
    return Urgency.LOW


def reorder_point(daily_consumption: float, lead_time_days: int = LEAD_TIME_DAYS) -> float:
    # Reorder Point = demand over lead time + SAFETY_STOCK_DAYS of buffer
    safety_stock = daily_consumption * SAFETY_STOCK_DAYS
    return (daily_consumption * lead_time_days) + safety_stock


def advise(product, daily_consumption: float, stock_out_point=None) -> ReorderSuggestion:
    """
    Reorder suggestion for one product from its adjusted daily consumption and
    the projected stock-out point (None when stock outlasts the horizon).
    Never negative; zero consumption gives a zero-quantity, low-urgency advice.
    """
    rate = max(0.0, float(daily_consumption))

    point = reorder_point(rate)
    order_qty = rate * ORDER_COVERAGE_DAYS
    stock_out_day = stock_out_point.day if stock_out_point is not None else None

    return ReorderSuggestion(
        should_reorder=product.stock_quantity <= point,
        reorder_point=round_half_up(point),
        suggested_order_quantity=round_half_up(order_qty),
        urgency=urgency_for(stock_out_day),
        estimated_cost=round_half_up(order_qty * float(product.unit_cost)),
        lead_time_days=LEAD_TIME_DAYS,
    )
