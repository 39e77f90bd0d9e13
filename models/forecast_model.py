import logging

from models.aggregation_model import aggregate, partition_window
from models.consumption_model import analyze_window
from models.forecast_types import ProductForecast
from models.projection_model import project
from models.reorder_model import advise
from utils.ai_config import DEFAULT_FORECAST_DAYS
from utils.date_utils import utc_now, window_start

logger = logging.getLogger(__name__)


def forecast_product(product, movement_repo, forecast_days: int = DEFAULT_FORECAST_DAYS, now=None, rng=None):
    """
    Runs the consumption -> projection -> reorder pipeline for a product that
    has already been loaded.
    """
    now = now or utc_now()

    estimate = aggregate(product.id, now, movement_repo)
    projection = project(
        product.stock_quantity,
        estimate.adjusted_daily_consumption,
        forecast_days,
        now,
        rng=rng,
    )
    suggestion = advise(product, estimate.adjusted_daily_consumption, projection.stock_out)

    stock_out = projection.stock_out
    logger.debug(
        "Forecast product=%s rate=%.3f trend=%s stock_out_day=%s",
        product.id, estimate.adjusted_daily_consumption, estimate.trend.value,
        stock_out.day if stock_out else None,
    )

    return ProductForecast(
        product_id=product.id,
        product_name=product.name,
        current_stock=product.stock_quantity,
        reorder_level=product.reorder_level,
        adjusted_daily_consumption=estimate.adjusted_daily_consumption,
        forecast_period=forecast_days,
        trend=estimate.trend,
        confidence=estimate.confidence,
        stock_out_date=stock_out.date if stock_out else None,
        days_until_stock_out=stock_out.day if stock_out else None,
        forecast=projection.points,
        reorder_suggestion=suggestion,
        analyses=estimate.analyses,
    )


def forecast_stock_level(product_id, product_repo, movement_repo,
                         forecast_days: int = DEFAULT_FORECAST_DAYS, clock=utc_now, rng=None):
    """
    Stock forecast for a single product id.
    Raises ProductNotFound when the product does not exist.
    """
    product = product_repo.get(product_id)
    return forecast_product(product, movement_repo, forecast_days, now=clock(), rng=rng)


def analyze_consumption(product_id, product_repo, movement_repo, days: int = DEFAULT_FORECAST_DAYS, clock=utc_now):
    """
    Single-window consumption analysis over the last `days` days.
    """
    product = product_repo.get(product_id)
    now = clock()
    movements = movement_repo.outbound_since(product.id, window_start(now, days))
    return analyze_window(partition_window(movements, now, days), days)
