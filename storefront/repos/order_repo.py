# storefront/repos/order_repo.py
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
        ).scalar_one_or_none()

    def list_orders(
        self,
        limit: int,
        offset: int,
        user_id: int | None = None,
        status: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Tuple[List[OrderModel], int]:
        conditions = []
        if user_id is not None:
            conditions.append(OrderModel.user_id == user_id)
        if status is not None:
            conditions.append(OrderModel.status == status)
        if start_date is not None:
            conditions.append(OrderModel.order_date >= start_date)
        if end_date is not None:
            conditions.append(OrderModel.order_date <= end_date)

        rows = self.db.execute(
            select(OrderModel)
            .where(*conditions)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.product))
            .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        total = self.db.execute(
            select(func.count(OrderModel.id)).where(*conditions)
        ).scalar_one()
        return list(rows), total

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.flush()
