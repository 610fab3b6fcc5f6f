# storefront/repos/category_repo.py
from typing import List, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def list_categories(self, limit: int, offset: int) -> Tuple[List[CategoryModel], int]:
        rows = self.db.execute(
            select(CategoryModel).order_by(CategoryModel.name).limit(limit).offset(offset)
        ).scalars().all()
        total = self.db.execute(select(func.count(CategoryModel.id))).scalar_one()
        return list(rows), total

    def count_products(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(ProductModel.category_id == category_id)
        ).scalar_one()

    def recent_products(self, category_id: int, limit: int = 10) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.category_id == category_id)
                .order_by(ProductModel.updated_at.desc(), ProductModel.id.desc())
                .limit(limit)
            ).scalars().all()
        )

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.flush()
