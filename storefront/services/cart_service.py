from typing import Dict, Any
from sqlalchemy.orm import Session
from storefront.data.database import transaction
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import BadRequest, NotFound
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.stock_ledger import StockLedger
from storefront.utils.money import line_total, sum_lines, to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain.
    commands (add, update, remove, clear) change state,
    query (get) only reads, apart from creating the cart on first access.
    Each command is one transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.stock = StockLedger(db)

    @staticmethod
    def cart_view(cart: CartModel) -> Dict[str, Any]:
        items = cart.items
        # total is derived on read, never stored
        total = sum_lines((i.unit_price, i.quantity) for i in items)

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product_name": i.product.name if i.product else None,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                    "line_total": line_total(i.unit_price, i.quantity),
                }
                for i in items
            ],
            "total": total,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
        }

    def _get_or_create(self, user_id: int) -> CartModel:
        if not self.users.get_user(user_id):
            raise NotFound(f"User {user_id} not found")

        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        cart = self.repo.create_cart(CartModel(user_id=user_id))
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    def _require_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFound(f"Cart for user {user_id} not found")
        return cart

    #query
    def get_or_create_cart(self, user_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            cart = self._get_or_create(user_id)
        return self.cart_view(cart)

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        return self.get_or_create_cart(user_id)

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise BadRequest("Quantity must be at least 1")

        with transaction(self.db):
            product = self.products.get_product(product_id)
            if not product:
                raise NotFound(f"Product {product_id} not found")

            self.stock.ensure_available(product, quantity)

            cart = self._get_or_create(user_id)
            price = to_money(product.price)

            existing_item = self.repo.get_cart_item_by_product(cart.id, product_id)
            if existing_item:
                new_quantity = existing_item.quantity + quantity
                # quantities accumulate, so stock is checked against the sum
                self.stock.ensure_available(product, new_quantity)

                logger.info(
                    f"Product {product_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {new_quantity}"
                )
                existing_item.quantity = new_quantity
                existing_item.unit_price = price
            else:
                logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                        unit_price=price,
                    )
                )

            self.repo.touch(cart)
            self.db.expire(cart, ["items"])

        return self.cart_view(cart)

    def update_item(self, user_id: int, cart_item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise BadRequest("Quantity must be at least 1")

        with transaction(self.db):
            cart = self._require_cart(user_id)

            item = self.repo.get_cart_item(cart.id, cart_item_id)
            if not item:
                raise NotFound(f"Item {cart_item_id} not found in cart")

            if item.product is not None:
                self.stock.ensure_available(item.product, quantity)

            logger.info(f"Cart {cart.id} item {cart_item_id} quantity {item.quantity} -> {quantity}")
            item.quantity = quantity
            self.repo.touch(cart)

        return self.cart_view(cart)

    def remove_item(self, user_id: int, cart_item_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            cart = self._require_cart(user_id)

            item = self.repo.get_cart_item(cart.id, cart_item_id)
            if not item:
                raise NotFound(f"Item {cart_item_id} not found in cart")

            logger.info(f"Removing item {cart_item_id} (product {item.product_id}) from cart {cart.id}")
            self.repo.delete_cart_item(item)
            self.repo.touch(cart)
            self.db.expire(cart, ["items"])

        return self.cart_view(cart)

    def clear(self, user_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            cart = self._require_cart(user_id)
            removed = self.repo.clear_items(cart)
            self.repo.touch(cart)

        logger.info(f"Cleared cart {cart.id}, removed {removed} items")
        return self.cart_view(cart)
