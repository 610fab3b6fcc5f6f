# storefront/api/__init__.py
from fastapi import APIRouter
from storefront.api.routers import health, users, products, categories, carts, orders, reports

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(products.router)
api_router.include_router(categories.router)
api_router.include_router(carts.router)
api_router.include_router(orders.router)
api_router.include_router(reports.router)
