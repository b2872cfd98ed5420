from sqlalchemy import Column, DateTime, String

from wms.core.dates import utcnow
from wms.database.base import Base


class UnitOfMeasure(Base):
    __tablename__ = "units_of_measure"

    # Short code such as "EA" or "KG".
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))
    deleted_at = Column(DateTime(timezone=True))


__all__ = ["UnitOfMeasure"]
