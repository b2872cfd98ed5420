from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryBase(BaseModel):
    product_id: int
    warehouse_id: str
    quantity: Decimal = Decimal("0")
    reserved_quantity: Decimal = Field(Decimal("0"), ge=0)
    location: Optional[str] = None
    last_count_date: Optional[date] = None


class InventoryCreate(InventoryBase):
    pass


class InventoryUpdate(BaseModel):
    quantity: Optional[Decimal] = None
    reserved_quantity: Optional[Decimal] = Field(None, ge=0)
    location: Optional[str] = None
    last_count_date: Optional[date] = None


class InventoryRead(InventoryBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockMovementCreate(BaseModel):
    product_id: int
    warehouse_id: str
    direction: Literal["IN", "OUT"]
    quantity: Decimal = Field(gt=0)
    reference: Optional[str] = None
    notes: Optional[str] = None


class StockMovementRead(BaseModel):
    id: int
    product_id: int
    warehouse_id: str
    direction: str
    quantity: Decimal
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BalanceCorrection(BaseModel):
    product_id: int
    warehouse_id: str
    recorded: Optional[Decimal] = None
    expected: Decimal


class ReconcileResult(BaseModel):
    dry_run: bool
    corrections: List[BalanceCorrection]
