import pandas as pd

from db.connection import engine as default_engine
from models.forecast_types import OutboundMovement, Product, ProductNotFound
from utils.ai_config import MAX_BULK_LIMIT
from utils.stock_constants import (
    OUTBOUND_TYPE,
    build_movement_stats_query,
    build_outbound_movements_query,
    build_product_count_query,
    build_product_list_query,
    build_product_query,
)


def _to_product(row) -> Product:
    return Product(
        id=int(row["id"]),
        name=str(row["name"]),
        stock_quantity=max(0, int(row["stock_quantity"])),
        reorder_level=max(0, int(row["reorder_level"])),
        unit_cost=max(0.0, float(row["unit_price"])),
    )


class ProductRepository:
    def __init__(self, engine=None):
        self.engine = engine or default_engine

    def get(self, product_id) -> Product:
        df = pd.read_sql(build_product_query(), self.engine, params={"product_id": product_id})
        if df.empty:
            raise ProductNotFound(product_id)
        return _to_product(df.iloc[0])

    def list(self, product_ids=None, only_low_stock: bool = False, limit: int = MAX_BULK_LIMIT):
        params = {"limit": int(limit)}
        if product_ids:
            params["product_ids"] = [int(pid) for pid in product_ids]

        query = build_product_list_query(with_ids=bool(product_ids), only_low_stock=only_low_stock)
        df = pd.read_sql(query, self.engine, params=params)
        return [_to_product(r) for _, r in df.iterrows()]

    def count(self, only_low_stock: bool = False) -> int:
        df = pd.read_sql(build_product_count_query(only_low_stock), self.engine)
        return int(df["total"].iloc[0]) if not df.empty else 0


class MovementRepository:
    def __init__(self, engine=None):
        self.engine = engine or default_engine

    def outbound_since(self, product_id, since):
        """Outbound movements of a product at or after `since`, oldest first."""
        df = pd.read_sql(
            build_outbound_movements_query(),
            self.engine,
            params={"product_id": product_id, "movement_type": OUTBOUND_TYPE, "since": since},
            parse_dates=["created_at"],
        )
        if df.empty:
            return []

        return [
            OutboundMovement(
                product_id=int(r["product_id"]),
                quantity=float(r["quantity"]),
                timestamp=pd.Timestamp(r["created_at"]).to_pydatetime(),
            )
            for _, r in df.iterrows()
        ]

    def movement_stats_since(self, since):
        df = pd.read_sql(build_movement_stats_query(), self.engine, params={"since": since})
        if df.empty:
            return {}

        stats = (
            df.groupby("type")["quantity"]
            .agg(count="count", totalQuantity="sum")
            .reset_index()
        )
        return {
            str(r["type"]): {
                "count": int(r["count"]),
                "totalQuantity": float(r["totalQuantity"]),
            }
            for _, r in stats.iterrows()
        }
