"""Inventory analytics tests"""

from datetime import timedelta

from conftest import NOW, make_product
from models.analytics_model import get_forecasting_analytics
from models.forecast_types import OutboundMovement


def test_counts_and_low_stock_share(product_repo, movement_repo, clock):
    for pid, stock in [(1, 5), (2, 50), (3, 80), (4, 90)]:
        product_repo.add(make_product(pid, stock=stock, reorder_level=20))
    movement_repo.add_outbound(1, 4, NOW - timedelta(days=2))
    movement_repo.add_outbound(1, 6, NOW - timedelta(days=40))
    movement_repo.inbound.append(OutboundMovement(1, 100, NOW - timedelta(days=1)))

    result = get_forecasting_analytics(product_repo, movement_repo, clock=clock)

    assert result["totalProducts"] == 4
    assert result["lowStockProducts"] == 1
    assert result["lowStockPercentage"] == 25.0
    assert result["movementStats"] == {
        "out": {"count": 1, "totalQuantity": 4},
        "in": {"count": 1, "totalQuantity": 100},
    }
    assert result["lastUpdated"] == NOW.isoformat()


def test_empty_inventory(product_repo, movement_repo, clock):
    result = get_forecasting_analytics(product_repo, movement_repo, clock=clock)

    assert result["totalProducts"] == 0
    assert result["lowStockPercentage"] == 0
    assert result["movementStats"] == {}
