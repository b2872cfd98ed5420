from pathlib import Path


APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent

TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"

DEFAULT_DASHBOARD_PATH = "/dashboard"
API_PREFIX = "/api"

MOVEMENT_IN = "IN"
MOVEMENT_OUT = "OUT"
MOVEMENT_DIRECTIONS = (MOVEMENT_IN, MOVEMENT_OUT)

OUT_POLICY_IGNORE = "ignore"
OUT_POLICY_MATERIALIZE = "materialize"
OUT_POLICY_REJECT = "reject"
OUT_POLICIES = (OUT_POLICY_IGNORE, OUT_POLICY_MATERIALIZE, OUT_POLICY_REJECT)

ORDER_TYPE_PURCHASE = "PURCHASE"
ORDER_TYPE_SALES = "SALES"
ORDER_TYPES = (ORDER_TYPE_PURCHASE, ORDER_TYPE_SALES)

ORDER_STATUSES = ("DRAFT", "PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED")
OPEN_ORDER_STATUSES = ("DRAFT", "PENDING", "PROCESSING")

WAREHOUSE_CODE_LENGTH = 10
UNCATEGORIZED_LABEL = "Uncategorized"
