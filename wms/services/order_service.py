import secrets
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from wms.core.constants import ORDER_STATUSES, ORDER_TYPES
from wms.core.dates import utcnow
from wms.core.exceptions import ValidationFailure
from wms.models.order import Order, OrderItem
from wms.services.entity_store import EntityStore, committing


def order_store(db: Session) -> EntityStore[Order]:
    return EntityStore(
        db,
        Order,
        order_by=(Order.order_date.desc(), Order.id.desc()),
        unique_key="order_number",
        search_fields=("order_number", "customer_name"),
        soft_delete=False,
    )


def order_item_store(db: Session) -> EntityStore[OrderItem]:
    return EntityStore(db, OrderItem, order_by=(OrderItem.id,), soft_delete=False)


def generate_order_number(order_date: date) -> str:
    return "ORD-{}-{}".format(order_date.strftime("%Y%m%d"), secrets.token_hex(3).upper())


def _validate_order_fields(fields: dict) -> None:
    order_type = fields.get("order_type")
    if order_type is not None and order_type not in ORDER_TYPES:
        raise ValidationFailure("order_type must be one of {}".format(", ".join(ORDER_TYPES)))
    status = fields.get("status")
    if status is not None and status not in ORDER_STATUSES:
        raise ValidationFailure("status must be one of {}".format(", ".join(ORDER_STATUSES)))


def _validate_item_fields(fields: dict) -> None:
    quantity = fields.get("quantity")
    if quantity is not None and Decimal(str(quantity)) <= 0:
        raise ValidationFailure("Order item quantity must be positive")


def _items_total(items: list[dict]) -> Optional[Decimal]:
    if not items or any(item.get("unit_price") is None for item in items):
        return None
    return sum(
        (Decimal(str(item["quantity"])) * Decimal(str(item["unit_price"])) for item in items),
        Decimal("0"),
    )


def create_order(db: Session, fields: dict, items: Iterable[dict] = ()) -> Order:
    """Insert an order header and its line items in one transaction."""
    fields = dict(fields)
    items = [dict(item) for item in items]
    _validate_order_fields(fields)
    for item in items:
        _validate_item_fields(item)

    fields.setdefault("order_date", utcnow().date())
    if not fields.get("order_number"):
        fields["order_number"] = generate_order_number(fields["order_date"])
    if fields.get("total_amount") is None:
        fields["total_amount"] = _items_total(items)

    order = Order(**fields)
    with committing(db, "Create order"):
        db.add(order)
        db.flush()
        for item in items:
            item.pop("order_id", None)
            db.add(OrderItem(order_id=order.id, **item))
        db.flush()
    db.refresh(order)
    return order


def update_order(db: Session, order_id: int, fields: dict) -> Optional[Order]:
    _validate_order_fields(fields)
    return order_store(db).update(order_id, fields)


def delete_order(db: Session, order_id: int) -> bool:
    """Hard-delete an order together with its line items."""
    with committing(db, "Delete order {}".format(order_id)):
        db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        result = db.execute(delete(Order).where(Order.id == order_id))
    return result.rowcount > 0


def list_orders_by_status(db: Session, status: str) -> list[Order]:
    stmt = (
        select(Order)
        .where(Order.status == status)
        .order_by(Order.order_date.desc(), Order.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def recent_orders(db: Session, limit: int = 10) -> list[Order]:
    stmt = select(Order).order_by(Order.order_date.desc(), Order.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())


def get_order_items(db: Session, order_id: int) -> list[OrderItem]:
    stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    return list(db.execute(stmt).scalars().all())


def create_order_item(db: Session, order_id: int, fields: dict) -> OrderItem:
    fields = dict(fields)
    _validate_item_fields(fields)
    fields["order_id"] = order_id
    return order_item_store(db).create(fields)


def update_order_item(db: Session, item_id: int, fields: dict) -> Optional[OrderItem]:
    _validate_item_fields(fields)
    return order_item_store(db).update(item_id, fields)


def delete_order_item(db: Session, item_id: int) -> bool:
    return order_item_store(db).delete(item_id)


__all__ = [
    "create_order",
    "create_order_item",
    "delete_order",
    "delete_order_item",
    "generate_order_number",
    "get_order_items",
    "list_orders_by_status",
    "order_store",
    "recent_orders",
    "update_order",
    "update_order_item",
]
