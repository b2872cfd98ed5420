from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Warehouse Management Dashboard"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./warehouse.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    SESSION_SECRET: Optional[str] = None
    SESSION_COOKIE: str = "wms_session"
    PASSWORD_PBKDF2_ROUNDS: int = 200_000
    MIN_PASSWORD_LENGTH: int = 6
    ALLOW_REGISTRATION: bool = True

    # ==============================
    # Inventory ledger
    # ==============================
    # ignore | materialize | reject
    LEDGER_OUT_WITHOUT_BALANCE: str = "ignore"
    WAREHOUSE_CODE_ATTEMPTS: int = 5
    RECENT_MOVEMENTS_LIMIT: int = 10

    # ==============================
    # Dashboard
    # ==============================
    ORDER_TREND_MONTHS: int = 6
    LOW_STOCK_LIMIT: int = 50


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
