# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from datetime import date, datetime

from storefront.data.models.order import OrderStatus


class ItemIn(BaseModel):
    """Adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product id")
    quantity: int = Field(1, ge=1, description="Units to add, accumulates with what is already in the cart")


class ItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, description="New quantity of the cart item")


class CartItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartItemOut]
    total: Decimal
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Mirror of a user issued by the auth provider."""

    id: int = Field(..., gt=0, description="User id")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    role: Literal["admin", "client"] = "client"


class UserRead(BaseModel):
    id: int
    name: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int | None = Field(0, ge=0, description="None for products without stock control")
    category_id: int | None = Field(None, gt=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int | None = Field(None, ge=0)
    category_id: int | None = Field(None, gt=0)


class ProductRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    stock_quantity: int | None = None
    category_id: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class ProductListOut(BaseModel):
    products: List[ProductRead]
    pagination: Pagination


class OrderItemOut(BaseModel):
    id: int
    product_id: int | None = None
    product_name: str | None = None
    quantity: int
    unit_price: Decimal


class OrderOut(BaseModel):
    id: int
    user_id: int | None = None
    status: OrderStatus
    total_amount: Decimal
    order_date: datetime
    created_at: datetime
    items: List[OrderItemOut] = []


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class CategoryRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryDetail(CategoryRead):
    """Category with its product count and the most recently updated products."""

    product_count: int
    products: List[ProductRead] = []


class CategoryListOut(BaseModel):
    categories: List[CategoryRead]
    pagination: Pagination


class CustomerOrdersRow(BaseModel):
    user_id: int | None = None
    user_name: str | None = None
    total_orders: int
    total_value: Decimal


class CustomerOrdersReport(BaseModel):
    customers: List[CustomerOrdersRow]
    pagination: Pagination


class DailyRevenueRow(BaseModel):
    day: date
    total_revenue: Decimal
    order_count: int


class RevenueSummary(BaseModel):
    total_revenue: Decimal
    total_orders: int
    total_days: int
    start_date: date
    end_date: date


class DailyRevenueReport(BaseModel):
    daily_revenue: List[DailyRevenueRow]
    summary: RevenueSummary
