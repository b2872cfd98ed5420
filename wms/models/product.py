from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String

from wms.core.dates import utcnow
from wms.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    sku = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    description = Column(String)
    barcode = Column(String)
    image_url = Column(String)

    category_id = Column(Integer, ForeignKey("product_categories.id"))
    uom_id = Column(String, ForeignKey("units_of_measure.id"))

    price = Column(Numeric(12, 2))
    cost = Column(Numeric(12, 2))

    weight = Column(Numeric(12, 3))
    length = Column(Numeric(12, 3))
    width = Column(Numeric(12, 3))
    height = Column(Numeric(12, 3))

    min_stock_level = Column(Numeric(14, 3))
    max_stock_level = Column(Numeric(14, 3))
    reorder_point = Column(Numeric(14, 3))
    lead_time = Column(Integer)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))
    deleted_at = Column(DateTime(timezone=True))
    created_by = Column(Integer, ForeignKey("users.id"))
    updated_by = Column(Integer, ForeignKey("users.id"))
    deleted_by = Column(Integer, ForeignKey("users.id"))

    __table_args__ = (
        Index("idx_products_name", "name"),
        Index("idx_products_category", "category_id"),
    )


__all__ = ["Product"]
