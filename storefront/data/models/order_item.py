from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    # kept as order history when the product is deleted
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    # copied from the cart item, immune to later catalogue price changes
    unit_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    order = relationship("OrderModel", back_populates="items")
    product = relationship("ProductModel")
