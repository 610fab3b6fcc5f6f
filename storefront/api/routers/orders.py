# storefront/api/routers/orders.py
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_order_service
from storefront.data.models.order import OrderStatus
from storefront.domain.errors import ServiceError
from storefront.domain.schemas import OrderOut, OrderListOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderOut, status_code=201)
def place_order(
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Creates an order from the caller's cart.
    """
    try:
        return svc.place_order(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/", response_model=OrderListOut)
def list_my_orders(
    user_id: int = Query(...),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_user_orders(user_id, limit=limit, offset=offset)


@router.get("/all", response_model=OrderListOut)
def list_all_orders(
    user_id: int = Query(..., description="Admin performing the query"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    customer_id: int | None = Query(None, description="Filter by order owner"),
    status: OrderStatus | None = Query(None),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.list_all_orders(
            admin_user_id=user_id,
            limit=limit,
            offset=offset,
            user_id=customer_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_order(user_id, order_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/{order_id}", response_model=OrderOut)
def delete_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Admin only; returns the deleted order, stock of its items is restored.
    """
    try:
        return svc.delete_order(user_id, order_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
