from sqlalchemy.orm import Session
from storefront.data.database import transaction
from storefront.data.models.user import UserModel
from storefront.domain.errors import Forbidden, NotFound
from storefront.repos.user_repo import UserRepo
from storefront.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        with transaction(self.db):
            existing = self.repo.get_user(payload.id)
            if existing:
                return UserRead.model_validate(existing)

            user = UserModel(id=payload.id, name=payload.name, role=payload.role)
            created = self.repo.create_user(user)
            return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound(f"User {user_id} not found")
        return UserRead.model_validate(user)

    def require_admin(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound(f"User {user_id} not found")
        if not user.is_admin:
            raise Forbidden("Only administrators can perform this operation")
        return user
