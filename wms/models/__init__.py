import importlib

from wms.models.category import ProductCategory
from wms.models.inventory import InventoryBalance
from wms.models.order import Order, OrderItem
from wms.models.product import Product
from wms.models.stock_movement import StockMovement
from wms.models.unit import UnitOfMeasure
from wms.models.user import User
from wms.models.warehouse import Warehouse


def import_all_models() -> None:
    for module_name in (
        "wms.models.category",
        "wms.models.inventory",
        "wms.models.order",
        "wms.models.product",
        "wms.models.stock_movement",
        "wms.models.unit",
        "wms.models.user",
        "wms.models.warehouse",
    ):
        importlib.import_module(module_name)


__all__ = [
    "InventoryBalance",
    "Order",
    "OrderItem",
    "Product",
    "ProductCategory",
    "StockMovement",
    "UnitOfMeasure",
    "User",
    "Warehouse",
    "import_all_models",
]
