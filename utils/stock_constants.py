from sqlalchemy import DateTime, bindparam, text

OUTBOUND_TYPE = "out"

SQL_LOW_STOCK_CONDITION = "p.stock_quantity <= p.reorder_level"

PRODUCT_COLUMNS = """
    p.id,
    p.name,
    p.stock_quantity,
    p.reorder_level,
    p.unit_price
"""


def build_product_query():
    return text(f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products p
        WHERE p.id = :product_id
    """)


def build_product_list_query(with_ids: bool = False, only_low_stock: bool = False):
    conditions = ["1 = 1"]
    if with_ids:
        conditions.append("p.id IN :product_ids")
    if only_low_stock:
        conditions.append(SQL_LOW_STOCK_CONDITION)

    query = text(f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products p
        WHERE {" AND ".join(conditions)}
        ORDER BY p.id
        LIMIT :limit
    """)
    if with_ids:
        query = query.bindparams(bindparam("product_ids", expanding=True))
    return query


def build_product_count_query(only_low_stock: bool = False):
    where = f"WHERE {SQL_LOW_STOCK_CONDITION}" if only_low_stock else ""
    return text(f"""
        SELECT COUNT(*) AS total
        FROM products p
        {where}
    """)


def build_outbound_movements_query():
    return text("""
        SELECT sm.product_id,
               sm.quantity,
               sm.created_at
        FROM stock_movements sm
        WHERE sm.product_id = :product_id
          AND sm.type = :movement_type
          AND sm.created_at >= :since
        ORDER BY sm.created_at ASC, sm.id ASC
    """).bindparams(bindparam("since", type_=DateTime()))


def build_movement_stats_query():
    return text("""
        SELECT sm.type,
               sm.quantity
        FROM stock_movements sm
        WHERE sm.created_at >= :since
    """).bindparams(bindparam("since", type_=DateTime()))
