from decimal import Decimal
from typing import List

from pydantic import BaseModel

from wms.schemas.catalog import ProductRead
from wms.schemas.inventory import InventoryRead, StockMovementRead


class LowStockItem(BaseModel):
    product: ProductRead
    inventory: InventoryRead


class CategoryValue(BaseModel):
    category: str
    value: Decimal


class OrderTrendPoint(BaseModel):
    date: str
    incoming: int
    outgoing: int


class InventoryValue(BaseModel):
    total_value: Decimal


class DashboardSummary(BaseModel):
    product_count: int
    warehouse_count: int
    open_order_count: int
    inventory_value: Decimal
    low_stock_count: int
    low_stock: List[LowStockItem]
    inventory_by_category: List[CategoryValue]
    order_trends: List[OrderTrendPoint]
    recent_movements: List[StockMovementRead]
