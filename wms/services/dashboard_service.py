from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.constants import (
    OPEN_ORDER_STATUSES,
    ORDER_TYPE_PURCHASE,
    ORDER_TYPE_SALES,
    UNCATEGORIZED_LABEL,
)
from wms.core.dates import last_months, month_key
from wms.models.category import ProductCategory
from wms.models.inventory import InventoryBalance
from wms.models.order import Order
from wms.models.product import Product
from wms.models.warehouse import Warehouse
from wms.services.ledger_service import recent_movements


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def inventory_value(db: Session) -> Decimal:
    stmt = (
        select(func.sum(InventoryBalance.quantity * Product.cost))
        .select_from(InventoryBalance)
        .join(Product, Product.id == InventoryBalance.product_id)
        .where(Product.deleted_at.is_(None))
    )
    return _as_decimal(db.execute(stmt).scalar())


def low_stock_items(db: Session, limit: Optional[int] = None) -> list[dict]:
    """Balances at or below their product's reorder point, by product name."""
    stmt = (
        select(Product, InventoryBalance)
        .join(InventoryBalance, InventoryBalance.product_id == Product.id)
        .where(
            Product.deleted_at.is_(None),
            Product.reorder_point.is_not(None),
            InventoryBalance.quantity <= Product.reorder_point,
        )
        .order_by(Product.name, InventoryBalance.warehouse_id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [
        {"product": product, "inventory": balance}
        for product, balance in db.execute(stmt).all()
    ]


def inventory_by_category(db: Session, limit: int = 5) -> list[dict]:
    category = func.coalesce(ProductCategory.name, UNCATEGORIZED_LABEL)
    value = func.sum(InventoryBalance.quantity)
    stmt = (
        select(category.label("category"), value.label("value"))
        .select_from(InventoryBalance)
        .join(Product, Product.id == InventoryBalance.product_id)
        .outerjoin(ProductCategory, ProductCategory.id == Product.category_id)
        .where(Product.deleted_at.is_(None))
        .group_by(category)
        .order_by(value.desc())
        .limit(limit)
    )
    return [
        {"category": row.category, "value": _as_decimal(row.value)}
        for row in db.execute(stmt).all()
    ]


def order_trends(db: Session, months: Optional[int] = None, today: Optional[date] = None) -> list[dict]:
    """Monthly counts of incoming (purchase) and outgoing (sales) orders, oldest month first."""
    if months is None:
        months = get_settings().ORDER_TREND_MONTHS
    labels = last_months(months, today)
    if not labels:
        return []

    buckets = {label: {"date": label, "incoming": 0, "outgoing": 0} for label in labels}
    start = date(int(labels[0][:4]), int(labels[0][5:7]), 1)
    stmt = select(Order.order_date, Order.order_type).where(
        Order.order_date >= start,
        Order.status != "CANCELLED",
    )
    for order_date, order_type in db.execute(stmt).all():
        bucket = buckets.get(month_key(order_date))
        if bucket is None:
            continue
        if order_type == ORDER_TYPE_PURCHASE:
            bucket["incoming"] += 1
        elif order_type == ORDER_TYPE_SALES:
            bucket["outgoing"] += 1
    return [buckets[label] for label in labels]


def _count(db: Session, stmt) -> int:
    return int(db.execute(stmt).scalar() or 0)


def dashboard_summary(db: Session) -> dict:
    settings = get_settings()
    low_stock = low_stock_items(db)
    return {
        "product_count": _count(
            db, select(func.count(Product.id)).where(Product.deleted_at.is_(None))
        ),
        "warehouse_count": _count(
            db, select(func.count(Warehouse.id)).where(Warehouse.deleted_at.is_(None))
        ),
        "open_order_count": _count(
            db, select(func.count(Order.id)).where(Order.status.in_(OPEN_ORDER_STATUSES))
        ),
        "inventory_value": inventory_value(db),
        "low_stock_count": len(low_stock),
        "low_stock": low_stock[: settings.LOW_STOCK_LIMIT],
        "inventory_by_category": inventory_by_category(db),
        "order_trends": order_trends(db),
        "recent_movements": recent_movements(db),
    }


__all__ = [
    "dashboard_summary",
    "inventory_by_category",
    "inventory_value",
    "low_stock_items",
    "order_trends",
]
