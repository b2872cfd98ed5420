from wms.database.base import Base
from wms.database.engine import engine
from wms.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "SessionLocal", "engine", "get_db", "session_scope"]
