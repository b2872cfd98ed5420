from wms.routers.auth import router as auth_router
from wms.routers.categories import router as categories_router
from wms.routers.dashboard import router as dashboard_router
from wms.routers.health import router as health_router
from wms.routers.inventory import router as inventory_router
from wms.routers.orders import router as orders_router
from wms.routers.products import router as products_router
from wms.routers.stock_movements import router as stock_movements_router
from wms.routers.units import router as units_router
from wms.routers.users import router as users_router
from wms.routers.warehouses import router as warehouses_router

__all__ = [
    "auth_router",
    "categories_router",
    "dashboard_router",
    "health_router",
    "inventory_router",
    "orders_router",
    "products_router",
    "stock_movements_router",
    "units_router",
    "users_router",
    "warehouses_router",
]
