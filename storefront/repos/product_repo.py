# storefront/repos/product_repo.py
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def list_products(
        self,
        limit: int,
        offset: int,
        in_stock: bool = False,
        category_id: int | None = None,
    ) -> Tuple[List[ProductModel], int]:
        conditions = []
        if in_stock:
            # unmanaged stock is always available
            conditions.append(
                or_(ProductModel.stock_quantity.is_(None), ProductModel.stock_quantity > 0)
            )
        if category_id is not None:
            conditions.append(ProductModel.category_id == category_id)

        rows = self.db.execute(
            select(ProductModel)
            .where(*conditions)
            .order_by(ProductModel.id)
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()
        return list(rows), total

    def list_out_of_stock(self, limit: int, offset: int) -> Tuple[List[ProductModel], int]:
        # NULL stock is unmanaged, never reported
        condition = ProductModel.stock_quantity <= 0
        rows = self.db.execute(
            select(ProductModel)
            .where(condition)
            .order_by(ProductModel.name)
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        total = self.db.execute(
            select(func.count(ProductModel.id)).where(condition)
        ).scalar_one()
        return list(rows), total

    def lock_products(self, product_ids: Sequence[int]) -> List[ProductModel]:
        """
        SELECT ... FOR UPDATE on the given rows, in id order so two checkouts
        never wait on each other in opposite order. SQLite ignores the lock clause.
        """
        if not product_ids:
            return []
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(sorted(set(product_ids))))
            .order_by(ProductModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        stock = stock - quantity, evaluated by the database and only where enough
        stock is left (or stock is unmanaged). Returns affected rowcount.
        """
        stmt = (
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                or_(
                    ProductModel.stock_quantity.is_(None),
                    ProductModel.stock_quantity >= quantity,
                ),
            )
            .values(
                stock_quantity=ProductModel.stock_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock_quantity=ProductModel.stock_quantity + quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def delete_product(self, product: ProductModel) -> int:
        """
        Deletes the product together with the cart lines pointing at it.
        Order lines keep their snapshot and lose the product reference.
        Returns the number of cart lines removed.
        """
        removed = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.product_id == product.id)
            .execution_options(synchronize_session=False)
        ).rowcount
        self.db.execute(
            update(OrderItemModel)
            .where(OrderItemModel.product_id == product.id)
            .values(product_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(product)
        self.db.flush()
        return removed
