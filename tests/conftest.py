"""
Shared test fixtures

- in-memory product / movement repositories
- fixed clock and seeded random generators
- SQLite engine for the SQL repositories
"""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# The default engine must never point at a real database during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from models.forecast_types import OutboundMovement, Product, ProductNotFound

NOW = datetime(2026, 3, 1, 12, 0, 0)


class InMemoryProductRepository:
    def __init__(self, products=()):
        self.products = {p.id: p for p in products}

    def add(self, product):
        self.products[product.id] = product

    def get(self, product_id):
        try:
            return self.products[product_id]
        except KeyError:
            raise ProductNotFound(product_id)

    def list(self, product_ids=None, only_low_stock=False, limit=50):
        rows = sorted(self.products.values(), key=lambda p: p.id)
        if product_ids:
            rows = [p for p in rows if p.id in set(product_ids)]
        if only_low_stock:
            rows = [p for p in rows if p.is_low_stock]
        return rows[:limit]

    def count(self, only_low_stock=False):
        return len([p for p in self.products.values() if p.is_low_stock or not only_low_stock])


class InMemoryMovementRepository:
    def __init__(self):
        self.outbound = {}
        self.inbound = []
        self.calls = []

    def add_outbound(self, product_id, quantity, timestamp):
        self.outbound.setdefault(product_id, []).append(OutboundMovement(product_id, quantity, timestamp))
        self.outbound[product_id].sort(key=lambda m: m.timestamp)

    def add_daily(self, product_id, quantity, days, now=NOW):
        """One outbound movement per day over the last `days` days."""
        for offset in range(days, 0, -1):
            self.add_outbound(product_id, quantity, now - timedelta(days=offset) + timedelta(hours=1))

    def outbound_since(self, product_id, since):
        self.calls.append((product_id, since))
        return [m for m in self.outbound.get(product_id, []) if m.timestamp >= since]

    def movement_stats_since(self, since):
        stats = {}
        moves = [("out", m) for ms in self.outbound.values() for m in ms] + [("in", m) for m in self.inbound]
        for kind, m in moves:
            if m.timestamp < since:
                continue
            entry = stats.setdefault(kind, {"count": 0, "totalQuantity": 0.0})
            entry["count"] += 1
            entry["totalQuantity"] += m.quantity
        return stats


class FailingMovementRepository(InMemoryMovementRepository):
    """Raises for selected product ids, like a history read timing out."""

    def __init__(self, failing_ids):
        super().__init__()
        self.failing_ids = set(failing_ids)

    def outbound_since(self, product_id, since):
        if product_id in self.failing_ids:
            raise RuntimeError(f"history read failed for {product_id}")
        return super().outbound_since(product_id, since)


def make_product(product_id=1, stock=100, reorder_level=20, unit_cost=2.0, name=None):
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        stock_quantity=stock,
        reorder_level=reorder_level,
        unit_cost=unit_cost,
    )


def movements(quantities, start=NOW - timedelta(days=6), step=timedelta(hours=6), product_id=1):
    return [
        OutboundMovement(product_id, q, start + i * step)
        for i, q in enumerate(quantities)
    ]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def product_repo():
    return InMemoryProductRepository()


@pytest.fixture
def movement_repo():
    return InMemoryMovementRepository()


@pytest.fixture
def sqlite_engine():
    from db.connection import build_engine
    from db.models import Base

    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def flask_app(product_repo, movement_repo, clock):
    from app import create_app

    app = create_app(
        product_repo=product_repo,
        movement_repo=movement_repo,
        clock=clock,
        random_seed=7,
        max_workers=4,
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
