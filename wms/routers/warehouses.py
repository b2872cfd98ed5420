from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.catalog import WarehouseCreate, WarehouseRead, WarehouseUpdate
from wms.services.catalog_service import create_warehouse, warehouse_store

router = APIRouter(
    prefix="/api/warehouses",
    tags=["Warehouses"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=list[WarehouseRead])
def list_warehouses(db: Session = Depends(get_db)):
    return warehouse_store(db).list_all()


@router.get("/{warehouse_id}", response_model=WarehouseRead)
def get_warehouse(warehouse_id: str, db: Session = Depends(get_db)):
    warehouse = warehouse_store(db).get(warehouse_id)
    if warehouse is None:
        raise NotFound("Warehouse", warehouse_id)
    return warehouse


@router.post("", response_model=WarehouseRead, status_code=status.HTTP_201_CREATED)
def add_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    return create_warehouse(db, payload.model_dump())


@router.put("/{warehouse_id}", response_model=WarehouseRead)
def update_warehouse(warehouse_id: str, payload: WarehouseUpdate, db: Session = Depends(get_db)):
    warehouse = warehouse_store(db).update(warehouse_id, payload.model_dump(exclude_unset=True))
    if warehouse is None:
        raise NotFound("Warehouse", warehouse_id)
    return warehouse


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_warehouse(warehouse_id: str, db: Session = Depends(get_db)):
    if not warehouse_store(db).delete(warehouse_id):
        raise NotFound("Warehouse", warehouse_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
