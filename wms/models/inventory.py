from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint

from wms.core.dates import utcnow
from wms.database.base import Base


class InventoryBalance(Base):
    """On-hand quantity of one product at one warehouse, derived from the ledger."""

    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    warehouse_id = Column(String, ForeignKey("warehouses.id"), nullable=False)

    quantity = Column(Numeric(14, 3), nullable=False, default=Decimal("0"))
    reserved_quantity = Column(Numeric(14, 3), nullable=False, default=Decimal("0"))
    location = Column(String)
    last_count_date = Column(Date)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),
    )


__all__ = ["InventoryBalance"]
