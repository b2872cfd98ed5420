import logging
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from wms.config import Settings, get_settings
from wms.core.constants import DEFAULT_DASHBOARD_PATH, STATIC_DIR, TEMPLATES_DIR
from wms.core.exceptions import WMSError
from wms.core.logging import setup_logging
from wms.database import Base, engine
from wms.models import import_all_models
from wms.routers import (
    auth_router,
    categories_router,
    dashboard_router,
    health_router,
    inventory_router,
    orders_router,
    products_router,
    stock_movements_router,
    units_router,
    users_router,
    warehouses_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    try:
        yield
    finally:
        engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET or settings.JWT_SECRET or secrets.token_urlsafe(32),
    session_cookie=settings.SESSION_COOKIE,
    same_site="lax",
    https_only=settings.ENVIRONMENT.lower() != "local",
)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.exception_handler(WMSError)
async def wms_error_handler(_request: Request, exc: WMSError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "The data store is unavailable.", "code": "STORAGE_FAILURE"},
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(units_router)
app.include_router(warehouses_router)
app.include_router(inventory_router)
app.include_router(stock_movements_router)
app.include_router(orders_router)
app.include_router(users_router)


@app.get("/")
def root():
    return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=302)


__all__ = ["app", "root"]
