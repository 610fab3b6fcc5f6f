import pytest

from storefront.data.models import CategoryModel, ProductModel, UserModel
from storefront.data.seed import seed
from storefront.domain.errors import Forbidden, NotFound
from storefront.domain.schemas import UserCreate
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService, send_order_placed_task
from storefront.services.user_service import UserService


class FakeRedis:
    def __init__(self):
        self.store = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


def test_create_user_is_idempotent(db):
    users = UserService(db)

    first = users.create_user(UserCreate(id=5, name="Ann"))
    again = users.create_user(UserCreate(id=5, name="Someone else", role="admin"))

    assert first == again
    assert again.role == "client"
    assert db.query(UserModel).count() == 1


def test_require_admin(db, make_user, admin):
    make_user(1)
    users = UserService(db)

    assert users.require_admin(admin.id).id == admin.id
    with pytest.raises(Forbidden):
        users.require_admin(1)
    with pytest.raises(NotFound):
        users.require_admin(2)


def test_seed_only_once(db):
    assert seed(db) is True
    assert seed(db) is False

    assert db.query(UserModel).count() == 2
    assert db.query(ProductModel).count() == 4
    assert db.query(CategoryModel).count() == 2
    assert db.query(ProductModel).filter(ProductModel.stock_quantity.is_(None)).count() == 1


def test_checkout_lock_is_exclusive_and_owned():
    locks = LockService("redis://localhost:6379/0")
    locks.redis = FakeRedis()

    assert locks.acquire_checkout_lock(1, "a", ttl=30) is True
    assert locks.acquire_checkout_lock(1, "b", ttl=30) is False
    assert locks.acquire_checkout_lock(2, "b", ttl=30) is True

    # only the holder can release
    assert locks.release_checkout_lock(1, "b") is False
    assert locks.release_checkout_lock(1, "a") is True
    assert locks.acquire_checkout_lock(1, "c", ttl=30) is True


def test_notification_task_runs_eagerly():
    assert NotificationService().send_order_placed(1, 2) is True


def test_notification_task_payload():
    assert send_order_placed_task.run(3, 4) == {"user_id": 3, "order_id": 4, "status": "sent"}


def test_notification_failure_is_reported(monkeypatch):
    class BrokenTask:
        def delay(self, *args, **kwargs):
            raise OSError("broker down")

    monkeypatch.setattr("storefront.services.notification_service.send_order_placed_task", BrokenTask())

    assert NotificationService().send_order_placed(1, 2) is False
