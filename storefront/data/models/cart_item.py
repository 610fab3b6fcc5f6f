from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, Numeric, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, validates

from storefront.data.database import Base
from storefront.utils.money import to_money


def _now():
    return datetime.now(timezone.utc)


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    # price at the moment the product was put in the cart
    unit_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="u_cart_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity"),
    )

    @validates("unit_price")
    def _quantize_unit_price(self, key, value):
        return to_money(value) if value is not None else value
