#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderStatus",
    "OrderItemModel",
]
