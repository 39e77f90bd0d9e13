DEFAULT_FORECAST_DAYS = 30
MAX_FORECAST_DAYS = 365
MAX_FORECAST_POINTS = 30  # points returned per product forecast

# Lookback windows (days) and their weight in the blended daily consumption
ANALYSIS_WINDOWS = {7: 0.4, 14: 0.3, 30: 0.2, 60: 0.1}
TREND_WINDOW_DAYS = 14

TREND_INCREASING_RATIO = 1.2
TREND_DECREASING_RATIO = 0.8
TREND_MULTIPLIERS = {"increasing": 1.2, "decreasing": 0.8, "stable": 1.0}

PROJECTION_VARIANCE = 0.1  # 10% of daily consumption

LEAD_TIME_DAYS = 7
SAFETY_STOCK_DAYS = 3
ORDER_COVERAGE_DAYS = 30  # suggested order covers a 30-day supply
HIGH_URGENCY_DAYS = 14
MEDIUM_URGENCY_DAYS = 30
CRITICAL_STOCKOUT_DAYS = 7

DEFAULT_BULK_LIMIT = 50
DEFAULT_RECOMMENDATION_LIMIT = 20
MAX_BULK_LIMIT = 500
ANALYTICS_LOOKBACK_DAYS = 30
