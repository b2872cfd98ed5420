from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.catalog import ProductCreate, ProductRead, ProductUpdate
from wms.services.catalog_service import product_store

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
def list_products(
    q: Optional[str] = Query(None, description="Case-insensitive name or SKU substring"),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return product_store(db).search(q)


@router.get("/sku/{sku}", response_model=ProductRead)
def get_product_by_sku(sku: str, db: Session = Depends(get_db), _auth=Depends(require_auth)):
    product = product_store(db).get_by(sku)
    if product is None:
        raise NotFound("Product", sku)
    return product


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db), _auth=Depends(require_auth)):
    product = product_store(db).get(product_id)
    if product is None:
        raise NotFound("Product", product_id)
    return product


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_auth),
):
    fields = payload.model_dump()
    fields["created_by"] = auth.get("user_id")
    return product_store(db).create(fields)


@router.put("/{product_id}", response_model=ProductRead)
@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    auth=Depends(require_auth),
):
    fields = payload.model_dump(exclude_unset=True)
    fields["updated_by"] = auth.get("user_id")
    product = product_store(db).update(product_id, fields)
    if product is None:
        raise NotFound("Product", product_id)
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: Session = Depends(get_db), auth=Depends(require_auth)):
    if not product_store(db).delete(product_id, deleted_by=auth.get("user_id")):
        raise NotFound("Product", product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
