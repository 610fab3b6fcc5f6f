# storefront/api/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.services.cart_service import CartService
from storefront.services.category_service import CategoryService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.report_service import ReportService
from storefront.services.user_service import UserService


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_order_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        lock_service=lock_service,
        notification_service=notification_service,
    )
