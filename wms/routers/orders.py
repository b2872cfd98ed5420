from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderItemUpdate,
    OrderRead,
    OrderReadWithItems,
    OrderUpdate,
)
from wms.services import order_service

router = APIRouter(prefix="/api", tags=["Orders"], dependencies=[Depends(require_auth)])


def _with_items(db: Session, order) -> OrderReadWithItems:
    result = OrderReadWithItems.model_validate(order)
    result.items = [
        OrderItemRead.model_validate(item)
        for item in order_service.get_order_items(db, order.id)
    ]
    return result


@router.get("/orders", response_model=list[OrderRead])
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    if status_filter:
        return order_service.list_orders_by_status(db, status_filter.strip().upper())
    return order_service.order_store(db).list_all()


@router.get("/orders/recent", response_model=list[OrderRead])
def recent_orders(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return order_service.recent_orders(db, limit)


@router.get("/orders/{order_id}", response_model=OrderReadWithItems)
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = order_service.order_store(db).get(order_id)
    if order is None:
        raise NotFound("Order", order_id)
    return _with_items(db, order)


@router.post("/orders", response_model=OrderReadWithItems, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_auth),
):
    fields = payload.model_dump(exclude={"items"}, exclude_none=True)
    fields["created_by"] = auth.get("user_id")
    items = [item.model_dump() for item in payload.items]
    order = order_service.create_order(db, fields, items)
    return _with_items(db, order)


@router.put("/orders/{order_id}", response_model=OrderRead)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    order = order_service.update_order(db, order_id, payload.model_dump(exclude_unset=True))
    if order is None:
        raise NotFound("Order", order_id)
    return order


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    if not order_service.delete_order(db, order_id):
        raise NotFound("Order", order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/orders/{order_id}/items", response_model=list[OrderItemRead])
def list_order_items(order_id: int, db: Session = Depends(get_db)):
    return order_service.get_order_items(db, order_id)


@router.post(
    "/orders/{order_id}/items",
    response_model=OrderItemRead,
    status_code=status.HTTP_201_CREATED,
)
def add_order_item(order_id: int, payload: OrderItemCreate, db: Session = Depends(get_db)):
    if order_service.order_store(db).get(order_id) is None:
        raise NotFound("Order", order_id)
    return order_service.create_order_item(db, order_id, payload.model_dump())


@router.put("/order-items/{item_id}", response_model=OrderItemRead)
def update_order_item(item_id: int, payload: OrderItemUpdate, db: Session = Depends(get_db)):
    item = order_service.update_order_item(db, item_id, payload.model_dump(exclude_unset=True))
    if item is None:
        raise NotFound("Order item", item_id)
    return item


@router.delete("/order-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_item(item_id: int, db: Session = Depends(get_db)):
    if not order_service.delete_order_item(db, item_id):
        raise NotFound("Order item", item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
