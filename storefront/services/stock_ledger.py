# storefront/services/stock_ledger.py
from typing import Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import InsufficientStock
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StockLedger:
    """
    Owns the stock_quantity counter of products.
    - check: read-side validation, NULL stock never blocks
    - reserve: relative, conditional decrement done by the database
    - restore: relative increment (compensation for a deleted order)
    Must be used inside an open transaction.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    @staticmethod
    def has_enough(product: ProductModel, quantity: int) -> bool:
        return product.stock_quantity is None or product.stock_quantity >= quantity

    def ensure_available(self, product: ProductModel, quantity: int) -> None:
        if not self.has_enough(product, quantity):
            logger.warning(
                f"Stock check failed for product {product.id}: "
                f"requested {quantity}, available {product.stock_quantity}"
            )
            raise InsufficientStock(product.name, quantity, product.stock_quantity)

    def lock(self, product_ids: Iterable[int]) -> List[ProductModel]:
        return self.repo.lock_products(list(product_ids))

    def reserve(self, product: ProductModel, quantity: int) -> None:
        # the WHERE clause re-validates stock, so a stale read cannot oversell
        rowcount = self.repo.decrement_stock(product.id, quantity)
        if rowcount == 0:
            logger.warning(f"Stock decrement rejected for product {product.id}, quantity {quantity}")
            raise InsufficientStock(product.name, quantity)

    def restore(self, product_id: int, quantity: int) -> None:
        rowcount = self.repo.increment_stock(product_id, quantity)
        if rowcount == 0:
            # product no longer exists, nothing to give back
            logger.warning(f"Stock restore skipped, product {product_id} not found")
