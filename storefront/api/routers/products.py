# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_product_service
from storefront.domain.errors import ServiceError
from storefront.domain.schemas import ProductCreate, ProductUpdate, ProductRead, ProductListOut
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductListOut)
def list_products(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    in_stock: bool = Query(False, description="Only products that can be bought"),
    svc: ProductService = Depends(get_product_service),
):
    return svc.list_products(limit=limit, offset=offset, in_stock=in_stock)


@router.get("/out-of-stock", response_model=ProductListOut)
def list_out_of_stock(
    user_id: int = Query(...),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    svc: ProductService = Depends(get_product_service),
):
    """
    Admin report: stock-managed products with nothing left.
    """
    try:
        return svc.list_out_of_stock(user_id, limit=limit, offset=offset)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    try:
        return svc.get_product(product_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    user_id: int = Query(...),
    svc: ProductService = Depends(get_product_service),
):
    try:
        return svc.create_product(user_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    user_id: int = Query(...),
    svc: ProductService = Depends(get_product_service),
):
    try:
        return svc.update_product(user_id, product_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/{product_id}", response_model=ProductRead)
def delete_product(
    product_id: int,
    user_id: int = Query(...),
    svc: ProductService = Depends(get_product_service),
):
    """
    Admin only; the product also leaves every cart, past orders keep their lines.
    """
    try:
        return svc.delete_product(user_id, product_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
