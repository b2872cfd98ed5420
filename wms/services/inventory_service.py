from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.models.inventory import InventoryBalance
from wms.services.entity_store import EntityStore


def balance_store(db: Session) -> EntityStore[InventoryBalance]:
    return EntityStore(
        db,
        InventoryBalance,
        order_by=(InventoryBalance.product_id, InventoryBalance.warehouse_id),
        soft_delete=False,
    )


def get_balance(db: Session, balance_id: int) -> Optional[InventoryBalance]:
    return balance_store(db).get(balance_id)


def get_balance_for(db: Session, product_id: int, warehouse_id: str) -> Optional[InventoryBalance]:
    stmt = (
        select(InventoryBalance)
        .where(
            InventoryBalance.product_id == product_id,
            InventoryBalance.warehouse_id == warehouse_id,
        )
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def create_balance(db: Session, fields: dict) -> InventoryBalance:
    """Insert a balance row. A second row for the same pair is a ConstraintViolation."""
    return balance_store(db).create(fields)


def update_balance(db: Session, balance_id: int, fields: dict) -> Optional[InventoryBalance]:
    return balance_store(db).update(balance_id, fields)


def delete_balance(db: Session, balance_id: int) -> bool:
    return balance_store(db).delete(balance_id)


def list_by_product(db: Session, product_id: int) -> list[InventoryBalance]:
    stmt = (
        select(InventoryBalance)
        .where(InventoryBalance.product_id == product_id)
        .order_by(InventoryBalance.warehouse_id)
    )
    return list(db.execute(stmt).scalars().all())


def list_by_warehouse(db: Session, warehouse_id: str) -> list[InventoryBalance]:
    stmt = (
        select(InventoryBalance)
        .where(InventoryBalance.warehouse_id == warehouse_id)
        .order_by(InventoryBalance.product_id)
    )
    return list(db.execute(stmt).scalars().all())


def list_all_balances(db: Session) -> list[InventoryBalance]:
    return balance_store(db).list_all()


__all__ = [
    "balance_store",
    "create_balance",
    "delete_balance",
    "get_balance",
    "get_balance_for",
    "list_all_balances",
    "list_by_product",
    "list_by_warehouse",
    "update_balance",
]
