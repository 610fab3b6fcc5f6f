from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime

from storefront.data.database import Base

ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_CLIENT)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
