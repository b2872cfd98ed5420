from wms.services.dashboard_service import dashboard_summary
from wms.services.ledger_service import reconcile_balances, record_movement
from wms.services.order_service import create_order, delete_order
from wms.services.user_service import authenticate, register_user

__all__ = [
    "authenticate",
    "create_order",
    "dashboard_summary",
    "delete_order",
    "reconcile_balances",
    "record_movement",
    "register_user",
]
