from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.catalog import UnitCreate, UnitRead, UnitUpdate
from wms.services.catalog_service import unit_store

router = APIRouter(
    prefix="/api/units-of-measure",
    tags=["Units of measure"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=list[UnitRead])
def list_units(db: Session = Depends(get_db)):
    return unit_store(db).list_all()


@router.get("/{unit_id}", response_model=UnitRead)
def get_unit(unit_id: str, db: Session = Depends(get_db)):
    unit = unit_store(db).get(unit_id)
    if unit is None:
        raise NotFound("Unit of measure", unit_id)
    return unit


@router.post("", response_model=UnitRead, status_code=status.HTTP_201_CREATED)
def create_unit(payload: UnitCreate, db: Session = Depends(get_db)):
    return unit_store(db).create(payload.model_dump())


@router.put("/{unit_id}", response_model=UnitRead)
def update_unit(unit_id: str, payload: UnitUpdate, db: Session = Depends(get_db)):
    unit = unit_store(db).update(unit_id, payload.model_dump(exclude_unset=True))
    if unit is None:
        raise NotFound("Unit of measure", unit_id)
    return unit


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unit(unit_id: str, db: Session = Depends(get_db)):
    if not unit_store(db).delete(unit_id):
        raise NotFound("Unit of measure", unit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
