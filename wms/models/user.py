from sqlalchemy import Boolean, Column, DateTime, Integer, String

from wms.core.dates import utcnow
from wms.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)

    first_name = Column(String)
    last_name = Column(String)
    email = Column(String)
    phone = Column(String)
    role = Column(String, nullable=False, default="staff")
    is_active = Column(Boolean, nullable=False, default=True)
    default_warehouse_id = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))
    deleted_at = Column(DateTime(timezone=True))


__all__ = ["User"]
