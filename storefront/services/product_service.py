# storefront/services/product_service.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFound
from storefront.domain.schemas import ProductCreate, ProductUpdate, ProductRead
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.user_service import UserService
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Catalogue: public reads, admin writes.
    Stock is set here only as an absolute admin correction, checkout goes through StockLedger.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)
        self.users = UserService(db)

    @staticmethod
    def _page(products, total: int, limit: int, offset: int) -> Dict[str, Any]:
        return {
            "products": [ProductRead.model_validate(p) for p in products],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    def _require_category(self, category_id: int) -> None:
        if not self.categories.get_category(category_id):
            raise NotFound(f"Category {category_id} not found")

    #query
    def get_product(self, product_id: int) -> ProductRead:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return ProductRead.model_validate(product)

    def list_products(self, limit: int = 20, offset: int = 0, in_stock: bool = False) -> Dict[str, Any]:
        products, total = self.repo.list_products(limit, offset, in_stock=in_stock)
        return self._page(products, total, limit, offset)

    def list_by_category(
        self, category_id: int, limit: int = 20, offset: int = 0, in_stock: bool = False
    ) -> Dict[str, Any]:
        self._require_category(category_id)
        products, total = self.repo.list_products(
            limit, offset, in_stock=in_stock, category_id=category_id
        )
        return self._page(products, total, limit, offset)

    def list_out_of_stock(self, admin_user_id: int, limit: int = 20, offset: int = 0) -> Dict[str, Any]:
        self.users.require_admin(admin_user_id)
        products, total = self.repo.list_out_of_stock(limit, offset)
        return self._page(products, total, limit, offset)

    #commands
    def create_product(self, admin_user_id: int, payload: ProductCreate) -> ProductRead:
        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            if payload.category_id is not None:
                self._require_category(payload.category_id)

            product = self.repo.create_product(
                ProductModel(
                    name=payload.name,
                    description=payload.description,
                    price=to_money(payload.price),
                    stock_quantity=payload.stock_quantity,
                    category_id=payload.category_id,
                )
            )
            logger.info(f"Product {product.id} '{product.name}' created by admin {admin_user_id}")
            return ProductRead.model_validate(product)

    def update_product(self, admin_user_id: int, product_id: int, payload: ProductUpdate) -> ProductRead:
        changes = payload.model_dump(exclude_unset=True)

        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            product = self.repo.get_product(product_id)
            if not product:
                raise NotFound(f"Product {product_id} not found")
            if changes.get("category_id") is not None:
                self._require_category(changes["category_id"])

            if "price" in changes and changes["price"] is not None:
                changes["price"] = to_money(changes["price"])
            for field, value in changes.items():
                # name and price are required columns
                if value is None and field in ("name", "price"):
                    continue
                setattr(product, field, value)

            self.db.flush()
            logger.info(f"Product {product_id} updated by admin {admin_user_id}: {sorted(changes)}")
            return ProductRead.model_validate(product)

    def delete_product(self, admin_user_id: int, product_id: int) -> ProductRead:
        """
        Removes the product from the catalogue and from every cart.
        Past orders keep their lines with the snapshotted price.
        """
        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            product = self.repo.get_product(product_id)
            if not product:
                raise NotFound(f"Product {product_id} not found")

            deleted = ProductRead.model_validate(product)
            removed = self.repo.delete_product(product)

            logger.info(
                f"Product {product_id} deleted by admin {admin_user_id}, "
                f"removed from {removed} carts"
            )

        self.db.expire_all()
        return deleted
