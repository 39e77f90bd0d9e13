import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np

from models.forecast_model import forecast_product
from models.forecast_types import BulkForecastResult, Urgency
from utils.ai_config import DEFAULT_FORECAST_DAYS, DEFAULT_BULK_LIMIT, DEFAULT_RECOMMENDATION_LIMIT
from utils.date_utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


def sort_forecasts(forecasts):
    """Soonest stock-out first; forecasts without a stock-out keep their order at the end."""
    return sorted(
        forecasts,
        key=lambda f: (f.days_until_stock_out is None, f.days_until_stock_out or 0),
    )


def _product_generators(seed, count):
    # One child stream per product, so results do not depend on thread scheduling
    return [np.random.default_rng(s) for s in np.random.SeedSequence(seed).spawn(count)]


def _run_single(product, movement_repo, forecast_days, now, rng, cancel_event):
    if cancel_event.is_set():
        return None
    return forecast_product(product, movement_repo, forecast_days, now=now, rng=rng)


def generate_bulk_forecast(
        product_repo,
        movement_repo,
        product_ids=None,
        forecast_days: int = DEFAULT_FORECAST_DAYS,
        include_only_low_stock: bool = False,
        limit: int = DEFAULT_BULK_LIMIT,
        clock=utc_now,
        seed: int | None = None,
        max_workers: int | None = None,
        cancel_event: threading.Event | None = None,
) -> BulkForecastResult:
    """
    Forecasts every selected product on a bounded thread pool.

    A product whose forecast raises is logged and listed in `failures`; the
    rest of the batch carries on. Setting `cancel_event` skips products that
    have not started yet and marks the result as cancelled.
    """
    cancel_event = cancel_event or threading.Event()

    products = product_repo.list(
        product_ids=product_ids or None,
        only_low_stock=include_only_low_stock,
        limit=limit,
    )
    if not products:
        return BulkForecastResult(forecasts=[], cancelled=cancel_event.is_set())

    now = clock()
    generators = _product_generators(seed, len(products))
    workers = max(1, min(max_workers or DEFAULT_MAX_WORKERS, len(products)))

    logger.info(
        f"Bulk forecast started: {len(products)} products "
        f"(days={forecast_days}, low_stock_only={include_only_low_stock}, max_workers={workers})"
    )

    results = [None] * len(products)
    failures = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {}
        for idx, product in enumerate(products):
            future = executor.submit(
                _run_single, product, movement_repo, forecast_days, now, generators[idx], cancel_event
            )
            futures[future] = idx

        for future in as_completed(futures):
            idx = futures[future]
            product = products[idx]
            try:
                results[idx] = future.result()
            except Exception as e:
                logger.error(f"Failed to forecast for product {product.id}: {e}", exc_info=True)
                failures.append({"productId": product.id, "error": str(e)})

    cancelled = cancel_event.is_set()
    forecasts = sort_forecasts([r for r in results if r is not None])

    if cancelled:
        logger.warning(
            f"Bulk forecast cancelled: {len(forecasts)}/{len(products)} products completed"
        )
    logger.info(
        f"Bulk forecast finished: {len(forecasts)} forecasts, {len(failures)} failures"
    )

    failures.sort(key=lambda f: str(f["productId"]))
    return BulkForecastResult(forecasts=forecasts, failures=failures, cancelled=cancelled)


def get_reorder_recommendations(
        product_repo,
        movement_repo,
        urgency_level: str = "all",
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
        **bulk_options,
):
    """
    Reorder recommendations for low-stock products that should be reordered,
    optionally narrowed to one urgency level.
    """
    bulk = generate_bulk_forecast(
        product_repo,
        movement_repo,
        include_only_low_stock=True,
        limit=limit,
        **bulk_options,
    )

    recommendations = [
        {
            "productId": f.product_id,
            "productName": f.product_name,
            "currentStock": f.current_stock,
            "reorderLevel": f.reorder_level,
            "daysUntilStockOut": f.days_until_stock_out,
            "urgency": f.reorder_suggestion.urgency.value,
            "suggestedOrderQuantity": f.reorder_suggestion.suggested_order_quantity,
            "estimatedCost": f.reorder_suggestion.estimated_cost,
            "confidence": f.confidence.value,
        }
        for f in bulk.forecasts
        if f.reorder_suggestion.should_reorder
    ]

    if urgency_level != "all":
        recommendations = [r for r in recommendations if r["urgency"] == urgency_level]

    return {
        "totalRecommendations": len(recommendations),
        "urgencyBreakdown": {
            u.value: sum(1 for r in recommendations if r["urgency"] == u.value)
            for u in (Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW)
        },
        "totalEstimatedCost": sum(r["estimatedCost"] for r in recommendations),
        "recommendations": recommendations,
    }
