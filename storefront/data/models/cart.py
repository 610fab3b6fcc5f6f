# storefront/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # one cart per user, reused after checkout
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
