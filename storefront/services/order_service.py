# storefront/services/order_service.py
import uuid
from datetime import datetime
from typing import Dict, Any

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import BadRequest, NotFound
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.stock_ledger import StockLedger
from storefront.services.user_service import UserService
from storefront.utils.money import sum_lines
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order domain, separate from CartService.
    Placing an order turns the caller's cart into an immutable order in one
    transaction; deleting an order (admin) gives the stock back.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.stock = StockLedger(db)
        self.users = UserService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service

    @staticmethod
    def order_view(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status,
            "total_amount": order.total_amount,
            "order_date": order.order_date,
            "created_at": order.created_at,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product_name": i.product.name if i.product else None,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                }
                for i in order.items
            ],
        }

    def place_order(self, user_id: int) -> Dict[str, Any]:
        """
        Use case: create an order from the caller's current cart.

        The per-user lock only rejects a double submit; stock safety comes from
        the transaction in _place_order. With Redis unreachable the checkout runs
        unguarded, and a failed release is left to the lock TTL.
        """
        token = uuid.uuid4().hex
        try:
            acquired = self.lock_service.acquire_checkout_lock(user_id, token, CHECKOUT_LOCK_TTL_SECONDS)
        except RedisError as e:
            logger.warning(f"Checkout lock unavailable for user {user_id}, continuing without it: {e}")
            token = None
        else:
            if not acquired:
                raise BadRequest("A checkout for this cart is already in progress")

        try:
            order = self._place_order(user_id)
        finally:
            if token is not None:
                self._release_lock(user_id, token)

        # outside the transaction, the order is already durable here
        self.notification_service.send_order_placed(user_id, order["id"])
        return order

    def _release_lock(self, user_id: int, token: str) -> None:
        try:
            self.lock_service.release_checkout_lock(user_id, token)
        except RedisError as e:
            logger.warning(f"Checkout lock release failed for user {user_id}, expires by TTL: {e}")

    def _place_order(self, user_id: int) -> Dict[str, Any]:
        with transaction(self.db):
            # 1. cart with items and products
            cart = self.carts.get_cart_by_user(user_id)
            if not cart or not cart.items:
                raise BadRequest("Cart is empty or not found")

            items = list(cart.items)

            # 2. validate everything before touching anything
            self.stock.lock(i.product_id for i in items)
            for item in items:
                product = item.product
                if product is None:
                    raise NotFound(f"Product {item.product_id} not found")
                self.stock.ensure_available(product, item.quantity)

            # 3. total from the snapshotted prices
            total = sum_lines((i.unit_price, i.quantity) for i in items)

            # 4. order header
            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    total_amount=total,
                )
            )

            # 5. frozen copy of every line, then relative stock decrement
            for item in items:
                self.repo.add_order_item(
                    OrderItemModel(
                        order_id=order.id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                )
                self.stock.reserve(item.product, item.quantity)

            # 6. empty the cart, the cart row stays for reuse
            self.carts.clear_items(cart)
            self.carts.touch(cart)

            logger.info(
                f"Order {order.id} created for user {user_id} from cart {cart.id}: "
                f"{len(items)} items, total {total}"
            )
            order_id = order.id

        # 7. reload after commit, stock updates bypassed the identity map
        self.db.expire_all()
        return self.order_view(self.repo.get_order(order_id))

    #queries
    def get_order(self, user_id: int, order_id: int) -> Dict[str, Any]:
        user = self.users.repo.get_user(user_id)
        order = self.repo.get_order(order_id)

        # someone else's order looks exactly like a missing one
        if not order or not user or (order.user_id != user_id and not user.is_admin):
            raise NotFound(f"Order {order_id} not found")

        return self.order_view(order)

    def list_user_orders(self, user_id: int, limit: int = 10, offset: int = 0) -> Dict[str, Any]:
        orders, total = self.repo.list_orders(limit=limit, offset=offset, user_id=user_id)
        return {
            "orders": [self.order_view(o) for o in orders],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    def list_all_orders(
        self,
        admin_user_id: int,
        limit: int = 20,
        offset: int = 0,
        user_id: int | None = None,
        status: OrderStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Dict[str, Any]:
        self.users.require_admin(admin_user_id)

        orders, total = self.repo.list_orders(
            limit=limit,
            offset=offset,
            user_id=user_id,
            status=status.value if status else None,
            start_date=start_date,
            end_date=end_date,
        )
        return {
            "orders": [self.order_view(o) for o in orders],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    #admin commands
    def delete_order(self, admin_user_id: int, order_id: int) -> Dict[str, Any]:
        """
        Use case: remove an order and put its units back on stock.
        Cart items consumed by the order are not recreated.
        """
        with transaction(self.db):
            self.users.require_admin(admin_user_id)

            order = self.repo.get_order(order_id)
            if not order:
                raise NotFound(f"Order {order_id} not found")

            deleted = self.order_view(order)

            for item in order.items:
                if item.product_id is not None:
                    self.stock.restore(item.product_id, item.quantity)

            # order items go with the order (cascade)
            self.repo.delete_order(order)

            logger.info(f"Order {order_id} deleted by admin {admin_user_id}, stock restored")

        self.db.expire_all()
        return deleted
