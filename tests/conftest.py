import os

# must be set before storefront modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.data.database import Base
from storefront.data.models import CartModel, CartItemModel, CategoryModel, ProductModel, UserModel
from storefront.services.order_service import OrderService


class FakeLockService:
    """In-memory stand-in for the Redis checkout guard."""

    def __init__(self):
        self.held = {}
        self.acquired = []

    def acquire_checkout_lock(self, user_id, token, ttl):
        if user_id in self.held:
            return False
        self.held[user_id] = token
        self.acquired.append(user_id)
        return True

    def release_checkout_lock(self, user_id, token):
        if self.held.get(user_id) == token:
            del self.held[user_id]
            return True
        return False


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_placed(self, user_id, order_id):
        self.sent.append((user_id, order_id))
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifier():
    return FakeNotificationService()


@pytest.fixture
def order_service(db, lock_service, notifier):
    return OrderService(db, lock_service=lock_service, notification_service=notifier)


@pytest.fixture
def make_user(db):
    def _make(user_id, name=None, role="client"):
        user = UserModel(id=user_id, name=name or f"user-{user_id}", role=role)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(100, name="Admin", role="admin")


@pytest.fixture
def make_product(db):
    def _make(name, price, stock=0, category=None):
        product = ProductModel(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            category_id=category.id if category is not None else None,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_category(db):
    def _make(name, description=None):
        category = CategoryModel(name=name, description=description)
        db.add(category)
        db.commit()
        return category

    return _make


@pytest.fixture
def put_in_cart(db):
    """Writes a cart line directly, bypassing the add-to-cart stock check."""

    def _put(user, product, quantity, unit_price=None):
        cart = db.query(CartModel).filter_by(user_id=user.id).one_or_none()
        if cart is None:
            cart = CartModel(user_id=user.id)
            db.add(cart)
            db.flush()
        db.add(
            CartItemModel(
                cart_id=cart.id,
                product_id=product if isinstance(product, int) else product.id,
                quantity=quantity,
                unit_price=Decimal(unit_price if unit_price is not None else product.price),
            )
        )
        db.commit()
        return cart

    return _put


def stock_of(db, product_id):
    db.expire_all()
    return db.get(ProductModel, product_id).stock_quantity
