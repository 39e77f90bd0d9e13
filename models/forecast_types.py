from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from utils.ai_config import CRITICAL_STOCKOUT_DAYS


class ForecastError(Exception):
    """Base error for the forecasting engine."""


class ProductNotFound(ForecastError):
    def __init__(self, product_id):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class Trend(str, Enum):
    STABLE = "stable"
    INCREASING = "increasing"
    DECREASING = "decreasing"


class Confidence(str, Enum):
    """Reliability label of a window estimate, ordered none < ... < high."""
    NONE = "none"
    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def score(self) -> int:
        return _CONFIDENCE_SCORES[self]

    @classmethod
    def from_score(cls, avg_score: float) -> "Confidence":
        if avg_score >= 3.5:
            return cls.HIGH
        if avg_score >= 2.5:
            return cls.MEDIUM
        if avg_score >= 1.5:
            return cls.LOW
        if avg_score >= 0.5:
            return cls.VERY_LOW
        return cls.NONE

    def __lt__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.score < other.score

    def __le__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.score <= other.score

    def __gt__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.score > other.score

    def __ge__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.score >= other.score


_CONFIDENCE_SCORES = {
    Confidence.NONE: 0,
    Confidence.VERY_LOW: 1,
    Confidence.LOW: 2,
    Confidence.MEDIUM: 3,
    Confidence.HIGH: 4,
}


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    stock_quantity: int
    reorder_level: int
    unit_cost: float

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.reorder_level


@dataclass(frozen=True)
class OutboundMovement:
    product_id: int
    quantity: float
    timestamp: datetime


@dataclass
class WindowAnalysis:
    window_days: int
    average: float
    total_consumption: float
    movement_count: int
    trend: Trend
    confidence: Confidence

    def to_dict(self):
        return {
            "average": self.average,
            "totalConsumption": self.total_consumption,
            "movementCount": self.movement_count,
            "trend": self.trend.value,
            "confidence": self.confidence.value,
            "periodDays": self.window_days,
        }


@dataclass
class ForecastPoint:
    day: int
    date: datetime
    predicted_stock: int
    expected_consumption: int

    def to_dict(self):
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "predictedStock": self.predicted_stock,
            "expectedConsumption": self.expected_consumption,
        }


@dataclass
class ReorderSuggestion:
    should_reorder: bool
    reorder_point: int
    suggested_order_quantity: int
    urgency: Urgency
    estimated_cost: int
    lead_time_days: int

    def to_dict(self):
        return {
            "shouldReorder": self.should_reorder,
            "suggestedReorderPoint": self.reorder_point,
            "suggestedOrderQuantity": self.suggested_order_quantity,
            "urgency": self.urgency.value,
            "estimatedCost": self.estimated_cost,
            "leadTimeDays": self.lead_time_days,
        }


@dataclass
class ProductForecast:
    product_id: int
    product_name: str
    current_stock: int
    reorder_level: int
    adjusted_daily_consumption: float
    forecast_period: int
    trend: Trend
    confidence: Confidence
    stock_out_date: Optional[datetime]
    days_until_stock_out: Optional[int]
    forecast: list
    reorder_suggestion: ReorderSuggestion
    analyses: dict

    @property
    def daily_consumption_rate(self) -> float:
        return round(self.adjusted_daily_consumption, 2)

    def to_dict(self):
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "currentStock": self.current_stock,
            "reorderLevel": self.reorder_level,
            "dailyConsumptionRate": self.daily_consumption_rate,
            "forecastPeriod": self.forecast_period,
            "trend": self.trend.value,
            "confidence": self.confidence.value,
            "stockOutDate": self.stock_out_date.isoformat() if self.stock_out_date else None,
            "daysUntilStockOut": self.days_until_stock_out,
            "forecast": [p.to_dict() for p in self.forecast],
            "reorderSuggestion": self.reorder_suggestion.to_dict(),
            "analyses": {f"{days}days": a.to_dict() for days, a in self.analyses.items()},
        }


@dataclass
class BulkForecastResult:
    forecasts: list
    failures: list = field(default_factory=list)
    cancelled: bool = False

    @property
    def total_forecasts(self) -> int:
        return len(self.forecasts)

    @property
    def critical_products(self) -> int:
        return sum(
            1 for f in self.forecasts
            if f.days_until_stock_out is not None and f.days_until_stock_out <= CRITICAL_STOCKOUT_DAYS
        )

    @property
    def low_stock_products(self) -> int:
        return sum(1 for f in self.forecasts if f.reorder_suggestion.should_reorder)

    def to_dict(self):
        return {
            "totalForecasts": self.total_forecasts,
            "criticalProducts": self.critical_products,
            "lowStockProducts": self.low_stock_products,
            "forecasts": [f.to_dict() for f in self.forecasts],
            "failures": self.failures,
            "cancelled": self.cancelled,
        }
