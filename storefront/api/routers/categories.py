# storefront/api/routers/categories.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_category_service, get_product_service
from storefront.domain.errors import ServiceError
from storefront.domain.schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryRead,
    CategoryDetail,
    CategoryListOut,
    ProductListOut,
)
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=CategoryListOut)
def list_categories(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    svc: CategoryService = Depends(get_category_service),
):
    return svc.list_categories(limit=limit, offset=offset)


@router.get("/{category_id}", response_model=CategoryDetail)
def get_category(category_id: int, svc: CategoryService = Depends(get_category_service)):
    try:
        return svc.get_category(category_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/{category_id}/products", response_model=ProductListOut)
def list_category_products(
    category_id: int,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    in_stock: bool = Query(False),
    svc: ProductService = Depends(get_product_service),
):
    try:
        return svc.list_by_category(category_id, limit=limit, offset=offset, in_stock=in_stock)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/", response_model=CategoryRead, status_code=201)
def create_category(
    payload: CategoryCreate,
    user_id: int = Query(...),
    svc: CategoryService = Depends(get_category_service),
):
    try:
        return svc.create_category(user_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    user_id: int = Query(...),
    svc: CategoryService = Depends(get_category_service),
):
    try:
        return svc.update_category(user_id, category_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/{category_id}", response_model=CategoryRead)
def delete_category(
    category_id: int,
    user_id: int = Query(...),
    svc: CategoryService = Depends(get_category_service),
):
    """
    Admin only; refused while products still belong to the category.
    """
    try:
        return svc.delete_category(user_id, category_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
