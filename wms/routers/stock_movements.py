from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.inventory import ReconcileResult, StockMovementCreate, StockMovementRead
from wms.services import ledger_service

router = APIRouter(prefix="/api/stock-movements", tags=["Stock movements"])


@router.post("", response_model=StockMovementRead, status_code=status.HTTP_201_CREATED)
def record_stock_movement(
    payload: StockMovementCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_auth),
):
    return ledger_service.record_movement(
        db,
        payload.product_id,
        payload.warehouse_id,
        payload.direction,
        payload.quantity,
        reference=payload.reference,
        notes=payload.notes,
        created_by=auth.get("user_id"),
    )


@router.get("", response_model=list[StockMovementRead])
def list_stock_movements(
    product_id: Optional[int] = Query(None),
    warehouse_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    if product_id is not None:
        return ledger_service.list_movements_by_product(db, product_id)
    if warehouse_id is not None:
        return ledger_service.list_movements_by_warehouse(db, warehouse_id)
    raise HTTPException(status_code=400, detail="Provide product_id or warehouse_id.")


@router.get("/recent", response_model=list[StockMovementRead])
def recent_stock_movements(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return ledger_service.recent_movements(db, limit)


@router.get("/{movement_id}", response_model=StockMovementRead)
def get_stock_movement(
    movement_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    movement = ledger_service.get_movement(db, movement_id)
    if movement is None:
        raise NotFound("Stock movement", movement_id)
    return movement


@router.post("/reconcile", response_model=ReconcileResult)
def reconcile_inventory(
    dry_run: bool = Query(False, description="Report drift without fixing it"),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    corrections = ledger_service.reconcile_balances(db, dry_run=dry_run)
    return {"dry_run": dry_run, "corrections": corrections}
