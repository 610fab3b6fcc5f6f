#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_cart_service
from storefront.domain.errors import ServiceError
from storefront.domain.schemas import (
    ItemIn,
    ItemUpdate,
    CartOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.get_cart(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.patch("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.update_item(user_id, item_id, payload.quantity)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_item(user_id, item_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/items", response_model=CartOut)
def clear_cart(
    user_id: int = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.clear(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
