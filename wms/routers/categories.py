from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.catalog import CategoryCreate, CategoryRead, CategoryUpdate
from wms.services.catalog_service import category_store

router = APIRouter(
    prefix="/api/product-categories",
    tags=["Categories"],
    dependencies=[Depends(require_auth)],
)


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return category_store(db).list_all()


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_store(db).get(category_id)
    if category is None:
        raise NotFound("Category", category_id)
    return category


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return category_store(db).create(payload.model_dump())


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    category = category_store(db).update(category_id, payload.model_dump(exclude_unset=True))
    if category is None:
        raise NotFound("Category", category_id)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    if not category_store(db).delete(category_id):
        raise NotFound("Category", category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
