# storefront/services/category_service.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.category import CategoryModel
from storefront.domain.errors import BadRequest, Conflict, NotFound
from storefront.domain.schemas import CategoryCreate, CategoryUpdate, CategoryRead, ProductRead
from storefront.repos.category_repo import CategoryRepo
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    """
    Product categories: public reads, admin writes.
    Names are unique; a category still holding products cannot be deleted.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CategoryRepo(db)
        self.users = UserService(db)

    def _require(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFound(f"Category {category_id} not found")
        return category

    #query
    def list_categories(self, limit: int = 20, offset: int = 0) -> Dict[str, Any]:
        categories, total = self.repo.list_categories(limit, offset)
        return {
            "categories": [CategoryRead.model_validate(c) for c in categories],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    def get_category(self, category_id: int) -> Dict[str, Any]:
        category = self._require(category_id)
        return {
            **CategoryRead.model_validate(category).model_dump(),
            "product_count": self.repo.count_products(category_id),
            "products": [ProductRead.model_validate(p) for p in self.repo.recent_products(category_id)],
        }

    #commands
    def create_category(self, admin_user_id: int, payload: CategoryCreate) -> CategoryRead:
        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            if self.repo.get_category_by_name(payload.name):
                raise Conflict(f"Category '{payload.name}' already exists")

            category = self.repo.create_category(
                CategoryModel(name=payload.name, description=payload.description)
            )
            logger.info(f"Category {category.id} '{category.name}' created by admin {admin_user_id}")
            return CategoryRead.model_validate(category)

    def update_category(self, admin_user_id: int, category_id: int, payload: CategoryUpdate) -> CategoryRead:
        changes = payload.model_dump(exclude_unset=True)

        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            category = self._require(category_id)

            name = changes.get("name")
            if name is not None and name != category.name:
                duplicate = self.repo.get_category_by_name(name)
                if duplicate and duplicate.id != category_id:
                    raise Conflict(f"Another category is already named '{name}'")
                category.name = name
            if "description" in changes:
                category.description = changes["description"]

            self.db.flush()
            logger.info(f"Category {category_id} updated by admin {admin_user_id}: {sorted(changes)}")
            return CategoryRead.model_validate(category)

    def delete_category(self, admin_user_id: int, category_id: int) -> CategoryRead:
        with transaction(self.db):
            self.users.require_admin(admin_user_id)
            category = self._require(category_id)

            if self.repo.count_products(category_id):
                raise BadRequest(f"Category {category_id} still has products and cannot be deleted")

            deleted = CategoryRead.model_validate(category)
            self.repo.delete_category(category)
            logger.info(f"Category {category_id} deleted by admin {admin_user_id}")

        return deleted
