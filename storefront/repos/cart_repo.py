# storefront/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, delete
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .options(selectinload(CartModel.items).selectinload(CartItemModel.product))
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id: int, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.cart_id == cart_id,
            )
        ).scalar_one_or_none()

    def get_cart_item_by_product(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_items(self, cart: CartModel) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id == cart.id)
            .execution_options(synchronize_session=False)
        )
        self.db.expire(cart, ["items"])
        return result.rowcount

    def touch(self, cart: CartModel) -> None:
        cart.updated_at = datetime.now(timezone.utc)
        self.db.flush()
