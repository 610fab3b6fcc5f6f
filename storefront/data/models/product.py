from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship, validates

from storefront.data.database import Base
from storefront.utils.money import to_money


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)

    # NULL means the product is not stock-managed and never blocks a purchase.
    # No column default: a default would also fire for an explicit None.
    stock_quantity = Column(Integer, nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    category = relationship("CategoryModel", back_populates="products")

    @validates("price")
    def _quantize_price(self, key, value):
        # stored at two decimals half-up on every engine
        return to_money(value) if value is not None else value
