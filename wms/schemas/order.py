from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderType = Literal["PURCHASE", "SALES"]
OrderStatus = Literal["DRAFT", "PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED"]


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: Decimal = Field(gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)


class OrderItemUpdate(BaseModel):
    product_id: Optional[int] = None
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)


class OrderItemRead(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: Decimal
    unit_price: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    order_number: Optional[str] = None
    order_type: OrderType = "SALES"
    status: OrderStatus = "PENDING"
    order_date: Optional[date] = None
    warehouse_id: Optional[str] = None
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)
    items: List[OrderItemCreate] = Field(default_factory=list)


class OrderUpdate(BaseModel):
    order_type: Optional[OrderType] = None
    status: Optional[OrderStatus] = None
    order_date: Optional[date] = None
    warehouse_id: Optional[str] = None
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)


class OrderRead(BaseModel):
    id: int
    order_number: str
    order_type: str
    status: str
    order_date: date
    warehouse_id: Optional[str] = None
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Optional[Decimal] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderReadWithItems(OrderRead):
    items: List[OrderItemRead] = Field(default_factory=list)
