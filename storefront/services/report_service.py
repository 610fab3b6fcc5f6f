# storefront/services/report_service.py
from datetime import datetime
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.domain.errors import BadRequest
from storefront.repos.report_repo import ReportRepo
from storefront.services.user_service import UserService
from storefront.utils.money import ZERO, to_money


class ReportService:
    """
    Admin sales reports over a closed [start, end] period of order dates.
    Sums are quantized again because SQLite hands them back as floats.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepo(db)
        self.users = UserService(db)

    @staticmethod
    def _check_period(start: datetime, end: datetime) -> None:
        if start > end:
            raise BadRequest("Start date must not be after end date")

    def orders_by_customer(
        self,
        admin_user_id: int,
        start_date: datetime,
        end_date: datetime,
        limit: int = 10,
        offset: int = 0,
    ) -> Dict[str, Any]:
        self.users.require_admin(admin_user_id)
        self._check_period(start_date, end_date)

        rows, total = self.repo.orders_by_customer(start_date, end_date, limit, offset)
        return {
            "customers": [
                {
                    "user_id": r.user_id,
                    "user_name": r.user_name,
                    "total_orders": r.total_orders,
                    "total_value": to_money(r.total_value or ZERO),
                }
                for r in rows
            ],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    def daily_revenue(self, admin_user_id: int, start_date: datetime, end_date: datetime) -> Dict[str, Any]:
        self.users.require_admin(admin_user_id)
        self._check_period(start_date, end_date)

        rows = self.repo.daily_revenue(start_date, end_date)
        totals = self.repo.revenue_totals(start_date, end_date)
        return {
            "daily_revenue": [
                {
                    "day": r.day,
                    "total_revenue": to_money(r.total_revenue or ZERO),
                    "order_count": r.order_count,
                }
                for r in rows
            ],
            "summary": {
                "total_revenue": to_money(totals.total_revenue or ZERO),
                "total_orders": totals.total_orders,
                "total_days": totals.total_days,
                "start_date": start_date.date(),
                "end_date": end_date.date(),
            },
        }
