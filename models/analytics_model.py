from utils.ai_config import ANALYTICS_LOOKBACK_DAYS
from utils.date_utils import utc_now, window_start


def get_forecasting_analytics(product_repo, movement_repo, clock=utc_now, lookback_days: int = ANALYTICS_LOOKBACK_DAYS):
    """
    Inventory-wide snapshot: product counts, share of low-stock products and
    movement totals per type over the lookback period.
    """
    now = clock()
    total_products = product_repo.count()
    low_stock_products = product_repo.count(only_low_stock=True)

    low_stock_pct = round(low_stock_products / total_products * 100, 2) if total_products > 0 else 0

    return {
        "totalProducts": total_products,
        "lowStockProducts": low_stock_products,
        "lowStockPercentage": low_stock_pct,
        "movementStats": movement_repo.movement_stats_since(window_start(now, lookback_days)),
        "lastUpdated": now.isoformat(),
    }
