from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from wms.core.session_auth import redirect_if_unauthenticated
from wms.dependencies import get_db, require_auth
from wms.schemas.dashboard import (
    CategoryValue,
    DashboardSummary,
    InventoryValue,
    LowStockItem,
    OrderTrendPoint,
)
from wms.services import dashboard_service

router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, db: Session = Depends(get_db)):
    redirect = redirect_if_unauthenticated(request)
    if redirect:
        return redirect
    templates = request.app.state.templates
    summary = DashboardSummary.model_validate(
        dashboard_service.dashboard_summary(db), from_attributes=True
    )
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"dashboard_data": jsonable_encoder(summary)},
    )


@router.get("/api/dashboard/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db), _auth=Depends(require_auth)):
    return dashboard_service.dashboard_summary(db)


@router.get("/api/dashboard/inventory-value", response_model=InventoryValue)
def inventory_value(db: Session = Depends(get_db), _auth=Depends(require_auth)):
    return {"total_value": dashboard_service.inventory_value(db)}


@router.get("/api/dashboard/low-stock", response_model=list[LowStockItem])
def low_stock(
    limit: int = Query(200, ge=1, le=2000),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return dashboard_service.low_stock_items(db, limit=limit)


@router.get("/api/dashboard/inventory-by-category", response_model=list[CategoryValue])
def inventory_by_category(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return dashboard_service.inventory_by_category(db, limit=limit)


@router.get("/api/dashboard/order-trends", response_model=list[OrderTrendPoint])
def order_trends(
    months: int = Query(6, ge=1, le=36),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    return dashboard_service.order_trends(db, months=months)
