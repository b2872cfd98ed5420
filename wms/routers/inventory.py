from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.inventory import InventoryCreate, InventoryRead, InventoryUpdate
from wms.services import inventory_service

router = APIRouter(
    prefix="/api/inventory",
    tags=["Inventory"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=list[InventoryRead])
def list_inventory(
    product_id: Optional[int] = Query(None),
    warehouse_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if product_id is not None and warehouse_id is not None:
        balance = inventory_service.get_balance_for(db, product_id, warehouse_id)
        return [balance] if balance is not None else []
    if product_id is not None:
        return inventory_service.list_by_product(db, product_id)
    if warehouse_id is not None:
        return inventory_service.list_by_warehouse(db, warehouse_id)
    return inventory_service.list_all_balances(db)


@router.get("/{balance_id}", response_model=InventoryRead)
def get_inventory(balance_id: int, db: Session = Depends(get_db)):
    balance = inventory_service.get_balance(db, balance_id)
    if balance is None:
        raise NotFound("Inventory", balance_id)
    return balance


@router.post("", response_model=InventoryRead, status_code=status.HTTP_201_CREATED)
def create_inventory(payload: InventoryCreate, db: Session = Depends(get_db)):
    return inventory_service.create_balance(db, payload.model_dump())


@router.put("/{balance_id}", response_model=InventoryRead)
def update_inventory(balance_id: int, payload: InventoryUpdate, db: Session = Depends(get_db)):
    balance = inventory_service.update_balance(db, balance_id, payload.model_dump(exclude_unset=True))
    if balance is None:
        raise NotFound("Inventory", balance_id)
    return balance


@router.delete("/{balance_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory(balance_id: int, db: Session = Depends(get_db)):
    if not inventory_service.delete_balance(db, balance_id):
        raise NotFound("Inventory", balance_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
