# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.database import SessionLocal, transaction
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel, ROLE_ADMIN, ROLE_CLIENT

DEMO_USERS = [
    {"id": 1, "name": "Admin", "role": ROLE_ADMIN},
    {"id": 2, "name": "Customer", "role": ROLE_CLIENT},
]

DEMO_CATEGORIES = [
    {"name": "Peripherals", "description": "Keyboards, mice and the like"},
    {"name": "Displays", "description": None},
]

# category given by name
DEMO_PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "stock_quantity": 10, "category": "Peripherals"},
    {"name": "Mouse", "price": Decimal("49.50"), "stock_quantity": 25, "category": "Peripherals"},
    {"name": "Monitor", "price": Decimal("899.00"), "stock_quantity": 3, "category": "Displays"},
    {"name": "Gift card", "price": Decimal("50.00"), "stock_quantity": None, "category": None},
]


def seed(db: Session | None = None) -> bool:
    """Loads demo users, categories and products into an empty database. Returns False if data already exists."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.execute(select(ProductModel.id).limit(1)).first():
            return False

        with transaction(db):
            for user in DEMO_USERS:
                if db.get(UserModel, user["id"]) is None:
                    db.add(UserModel(**user))
            categories = {}
            for category in DEMO_CATEGORIES:
                categories[category["name"]] = CategoryModel(**category)
                db.add(categories[category["name"]])
            for product in DEMO_PRODUCTS:
                fields = dict(product)
                category = fields.pop("category")
                db.add(ProductModel(**fields, category=categories.get(category)))
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    from storefront.data.database import init_db

    init_db()
    seed()
