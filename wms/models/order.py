from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String

from wms.core.dates import utcnow
from wms.database.base import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String, nullable=False, unique=True)
    # PURCHASE orders bring stock in, SALES orders take it out.
    order_type = Column(String, nullable=False, default="SALES")
    status = Column(String, nullable=False, default="PENDING")
    order_date = Column(Date, nullable=False)

    warehouse_id = Column(String, ForeignKey("warehouses.id"))
    customer_name = Column(String)
    notes = Column(String)
    total_amount = Column(Numeric(14, 2))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))
    created_by = Column(Integer, ForeignKey("users.id"))

    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_order_date", "order_date"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Numeric(14, 3), nullable=False)
    unit_price = Column(Numeric(12, 2))

    __table_args__ = (
        Index("idx_order_items_order", "order_id"),
    )


__all__ = ["Order", "OrderItem"]
