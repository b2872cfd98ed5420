from sqlalchemy import Column, DateTime, Integer, String

from wms.core.dates import utcnow
from wms.database.base import Base


class ProductCategory(Base):
    __tablename__ = "product_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))
    deleted_at = Column(DateTime(timezone=True))


__all__ = ["ProductCategory"]
