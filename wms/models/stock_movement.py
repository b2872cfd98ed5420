from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String

from wms.core.dates import utcnow
from wms.database.base import Base


class StockMovement(Base):
    """Append-only ledger entry. Rows are never updated or deleted."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    warehouse_id = Column(String, ForeignKey("warehouses.id"), nullable=False)

    direction = Column(String(3), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    reference = Column(String)
    notes = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(Integer, ForeignKey("users.id"))

    __table_args__ = (
        CheckConstraint("direction IN ('IN', 'OUT')", name="ck_stock_movements_direction"),
        CheckConstraint("quantity > 0", name="ck_stock_movements_quantity"),
        Index("idx_movements_product_warehouse", "product_id", "warehouse_id"),
        Index("idx_movements_created_at", "created_at"),
    )


__all__ = ["StockMovement"]
