# storefront/repos/report_repo.py
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import Date, select, func
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel


class ReportRepo:
    """Aggregate queries over orders, read only."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _in_period(start: datetime, end: datetime):
        return (OrderModel.order_date >= start, OrderModel.order_date <= end)

    def orders_by_customer(
        self, start: datetime, end: datetime, limit: int, offset: int
    ) -> Tuple[List[Row], int]:
        order_count = func.count(OrderModel.id)
        rows = self.db.execute(
            select(
                OrderModel.user_id,
                UserModel.name.label("user_name"),
                order_count.label("total_orders"),
                func.sum(OrderModel.total_amount).label("total_value"),
            )
            .outerjoin(UserModel, UserModel.id == OrderModel.user_id)
            .where(*self._in_period(start, end))
            .group_by(OrderModel.user_id, UserModel.name)
            .order_by(order_count.desc(), OrderModel.user_id)
            .limit(limit)
            .offset(offset)
        ).all()
        total = self.db.execute(
            select(func.count(func.distinct(OrderModel.user_id))).where(*self._in_period(start, end))
        ).scalar_one()
        return list(rows), total

    def daily_revenue(self, start: datetime, end: datetime) -> List[Row]:
        # DATE() exists on both PostgreSQL and SQLite, type_ makes SQLite return a date
        day = func.date(OrderModel.order_date, type_=Date)
        return list(
            self.db.execute(
                select(
                    day.label("day"),
                    func.sum(OrderModel.total_amount).label("total_revenue"),
                    func.count(OrderModel.id).label("order_count"),
                )
                .where(*self._in_period(start, end))
                .group_by(day)
                .order_by(day)
            ).all()
        )

    def revenue_totals(self, start: datetime, end: datetime) -> Row:
        day = func.date(OrderModel.order_date, type_=Date)
        return self.db.execute(
            select(
                func.sum(OrderModel.total_amount).label("total_revenue"),
                func.count(OrderModel.id).label("total_orders"),
                func.count(func.distinct(day)).label("total_days"),
            ).where(*self._in_period(start, end))
        ).one()
