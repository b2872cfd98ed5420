"""Stock-movement ledger and the applier that keeps balances in step with it.

The ledger is the source of truth. Each movement is appended and its signed
quantity applied to the matching ``inventory`` row in the same transaction,
using a single ``quantity = quantity + :delta`` update so concurrent callers
for the same (product, warehouse) pair cannot lose each other's change.
"""

import logging
from decimal import Decimal, InvalidOperation
from itertools import groupby
from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.constants import (
    MOVEMENT_DIRECTIONS,
    MOVEMENT_IN,
    OUT_POLICIES,
    OUT_POLICY_MATERIALIZE,
    OUT_POLICY_REJECT,
)
from wms.core.dates import utcnow
from wms.core.exceptions import ValidationFailure
from wms.models.inventory import InventoryBalance
from wms.models.stock_movement import StockMovement
from wms.services.entity_store import committing
from wms.services.inventory_service import list_all_balances

logger = logging.getLogger(__name__)


def normalize_direction(value) -> str:
    direction = str(value or "").strip().upper()
    if direction not in MOVEMENT_DIRECTIONS:
        raise ValidationFailure("direction must be IN or OUT, got {!r}".format(value))
    return direction


def parse_quantity(value) -> Decimal:
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationFailure("quantity must be a number, got {!r}".format(value)) from exc
    if not quantity.is_finite() or quantity <= 0:
        raise ValidationFailure("quantity must be a positive number, got {!r}".format(value))
    return quantity


def resolve_out_policy(policy: Optional[str] = None) -> str:
    if policy is None:
        policy = get_settings().LEDGER_OUT_WITHOUT_BALANCE
    policy = policy.strip().lower()
    if policy not in OUT_POLICIES:
        raise ValueError(
            "LEDGER_OUT_WITHOUT_BALANCE must be one of {}".format(", ".join(OUT_POLICIES))
        )
    return policy


def signed_quantity(direction: str, quantity) -> Decimal:
    quantity = Decimal(str(quantity))
    return quantity if direction == MOVEMENT_IN else -quantity


def _apply_delta(db: Session, product_id: int, warehouse_id: str, delta: Decimal) -> bool:
    stmt = (
        update(InventoryBalance)
        .where(
            InventoryBalance.product_id == product_id,
            InventoryBalance.warehouse_id == warehouse_id,
        )
        .values(quantity=InventoryBalance.quantity + delta, updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return db.execute(stmt).rowcount > 0


def _open_balance(db: Session, product_id: int, warehouse_id: str, quantity: Decimal) -> None:
    try:
        with db.begin_nested():
            db.add(
                InventoryBalance(
                    product_id=product_id,
                    warehouse_id=warehouse_id,
                    quantity=quantity,
                    reserved_quantity=Decimal("0"),
                )
            )
    except IntegrityError:
        # Another writer opened the row between our update and insert.
        if not _apply_delta(db, product_id, warehouse_id, quantity):
            raise


def record_movement(
    db: Session,
    product_id: int,
    warehouse_id: str,
    direction: str,
    quantity,
    *,
    reference: Optional[str] = None,
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
    out_policy: Optional[str] = None,
) -> StockMovement:
    """Append a movement and apply it to the balance. Returns the ledger entry."""
    direction = normalize_direction(direction)
    quantity = parse_quantity(quantity)
    out_policy = resolve_out_policy(out_policy)
    delta = signed_quantity(direction, quantity)

    movement = StockMovement(
        product_id=product_id,
        warehouse_id=warehouse_id,
        direction=direction,
        quantity=quantity,
        reference=reference,
        notes=notes,
        created_by=created_by,
        created_at=utcnow(),
    )

    with committing(db, "Record stock movement"):
        db.add(movement)
        db.flush()

        if not _apply_delta(db, product_id, warehouse_id, delta):
            if direction == MOVEMENT_IN or out_policy == OUT_POLICY_MATERIALIZE:
                _open_balance(db, product_id, warehouse_id, delta)
            elif out_policy == OUT_POLICY_REJECT:
                logger.warning(
                    "Rejected OUT movement of %s for product %s at %s: no balance",
                    quantity,
                    product_id,
                    warehouse_id,
                )
                raise ValidationFailure(
                    "No inventory balance for product {} at warehouse {}".format(
                        product_id, warehouse_id
                    )
                )
            else:
                logger.warning(
                    "OUT movement of %s for product %s at %s recorded without a balance",
                    quantity,
                    product_id,
                    warehouse_id,
                )

    db.refresh(movement)
    logger.info(
        "Recorded %s movement %s: product %s at %s, qty %s",
        direction,
        movement.id,
        product_id,
        warehouse_id,
        quantity,
        extra={"movement_id": movement.id, "product_id": product_id, "warehouse_id": warehouse_id},
    )
    return movement


def _newest_first(stmt):
    return stmt.order_by(StockMovement.created_at.desc(), StockMovement.id.desc())


def get_movement(db: Session, movement_id: int) -> Optional[StockMovement]:
    return db.get(StockMovement, movement_id)


def list_movements_by_product(db: Session, product_id: int) -> list[StockMovement]:
    stmt = _newest_first(select(StockMovement).where(StockMovement.product_id == product_id))
    return list(db.execute(stmt).scalars().all())


def list_movements_by_warehouse(db: Session, warehouse_id: str) -> list[StockMovement]:
    stmt = _newest_first(select(StockMovement).where(StockMovement.warehouse_id == warehouse_id))
    return list(db.execute(stmt).scalars().all())


def recent_movements(db: Session, limit: Optional[int] = None) -> list[StockMovement]:
    if limit is None:
        limit = get_settings().RECENT_MOVEMENTS_LIMIT
    stmt = _newest_first(select(StockMovement)).limit(limit)
    return list(db.execute(stmt).scalars().all())


def replay_quantity(movements: Iterable, out_policy: Optional[str] = None) -> Optional[Decimal]:
    """Balance quantity produced by applying ``movements`` in order to an empty pair.

    Returns None when the applier would never have opened a balance row.
    """
    out_policy = resolve_out_policy(out_policy)
    quantity = None
    for movement in movements:
        delta = signed_quantity(movement.direction, movement.quantity)
        if quantity is not None:
            quantity += delta
        elif movement.direction == MOVEMENT_IN or out_policy == OUT_POLICY_MATERIALIZE:
            quantity = delta
    return quantity


def reconcile_balances(
    db: Session,
    *,
    dry_run: bool = False,
    out_policy: Optional[str] = None,
) -> list[dict]:
    """Recompute balances from the ledger and repair rows that drifted.

    Pairs without ledger history are left alone.
    """
    out_policy = resolve_out_policy(out_policy)
    stmt = select(StockMovement).order_by(
        StockMovement.product_id,
        StockMovement.warehouse_id,
        StockMovement.created_at,
        StockMovement.id,
    )
    movements = db.execute(stmt).scalars().all()
    balances = {
        (balance.product_id, balance.warehouse_id): balance
        for balance in list_all_balances(db)
    }

    corrections = []
    for key, group in groupby(movements, key=lambda m: (m.product_id, m.warehouse_id)):
        expected = replay_quantity(group, out_policy)
        if expected is None:
            continue
        balance = balances.get(key)
        recorded = Decimal(str(balance.quantity)) if balance is not None else None
        if recorded is not None and recorded == expected:
            continue
        corrections.append(
            {
                "product_id": key[0],
                "warehouse_id": key[1],
                "recorded": recorded,
                "expected": expected,
            }
        )

    if dry_run or not corrections:
        return corrections

    with committing(db, "Reconcile inventory balances"):
        for correction in corrections:
            key = (correction["product_id"], correction["warehouse_id"])
            balance = balances.get(key)
            if balance is None:
                db.add(
                    InventoryBalance(
                        product_id=key[0],
                        warehouse_id=key[1],
                        quantity=correction["expected"],
                        reserved_quantity=Decimal("0"),
                    )
                )
            else:
                balance.quantity = correction["expected"]
                balance.updated_at = utcnow()
            logger.warning(
                "Balance for product %s at %s corrected from %s to %s",
                key[0],
                key[1],
                correction["recorded"],
                correction["expected"],
            )
    return corrections


__all__ = [
    "get_movement",
    "list_movements_by_product",
    "list_movements_by_warehouse",
    "normalize_direction",
    "parse_quantity",
    "recent_movements",
    "reconcile_balances",
    "record_movement",
    "replay_quantity",
    "resolve_out_policy",
    "signed_quantity",
]
