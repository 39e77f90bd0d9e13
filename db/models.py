from datetime import datetime

from sqlalchemy import (
    Column, String, Numeric, Integer, TIMESTAMP, BigInteger, ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# 1) Products (owned by the inventory subsystem, read-only here)
class Product(Base):
    __tablename__ = "products"

    id = Column(BigInteger, primary_key=True)
    name = Column(String(255), nullable=False)
    generic_name = Column(String(255))
    category = Column(String(100))
    manufacturer = Column(String(255))

    stock_quantity = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_nonneg"),
        CheckConstraint("reorder_level >= 0", name="ck_products_reorder_nonneg"),
    )


# 2) Stock movements (immutable history; "out" rows feed the forecasts)
class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(BigInteger, primary_key=True)
    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False)
    type = Column(String(3), nullable=False)
    quantity = Column(Integer, nullable=False)
    reason = Column(String(255), nullable=False, default="")
    previous_stock = Column(Integer, nullable=False, default=0)
    new_stock = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("type IN ('in', 'out')", name="ck_stock_movements_type"),
        CheckConstraint("quantity > 0", name="ck_stock_movements_qty_pos"),
        Index("ix_stock_movements_product_type_created", "product_id", "type", "created_at"),
    )
