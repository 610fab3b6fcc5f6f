# storefront/api/routers/reports.py
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_report_service
from storefront.domain.errors import ServiceError
from storefront.domain.schemas import CustomerOrdersReport, DailyRevenueReport
from storefront.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/orders-by-customer", response_model=CustomerOrdersReport)
def orders_by_customer(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    user_id: int = Query(..., description="Admin performing the query"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    svc: ReportService = Depends(get_report_service),
):
    """
    Order count and value per customer in the period, busiest customers first.
    """
    try:
        return svc.orders_by_customer(user_id, start_date, end_date, limit=limit, offset=offset)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/daily-revenue", response_model=DailyRevenueReport)
def daily_revenue(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    user_id: int = Query(..., description="Admin performing the query"),
    svc: ReportService = Depends(get_report_service),
):
    try:
        return svc.daily_revenue(user_id, start_date, end_date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
