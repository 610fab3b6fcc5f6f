from decimal import Decimal

import pytest

from storefront.data.models import CartItemModel, OrderItemModel
from storefront.domain.errors import Forbidden, NotFound
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService


@pytest.fixture
def products(db):
    return ProductService(db)


def test_admin_creates_product(products, admin):
    created = products.create_product(
        admin.id, ProductCreate(name="Lamp", price=Decimal("30.50"), stock_quantity=4)
    )

    fetched = products.get_product(created.id)
    assert fetched.name == "Lamp"
    assert fetched.price == Decimal("30.50")
    assert fetched.stock_quantity == 4


def test_client_cannot_create_product(products, make_user):
    make_user(1)

    with pytest.raises(Forbidden):
        products.create_product(1, ProductCreate(name="Lamp", price=Decimal("30.50")))

    assert products.list_products()["pagination"]["total"] == 0


def test_update_product_partial(products, admin, make_product):
    lamp = make_product("Lamp", "30.50", stock=4)

    updated = products.update_product(admin.id, lamp.id, ProductUpdate(price=Decimal("25.00")))

    assert updated.price == Decimal("25.00")
    assert updated.stock_quantity == 4
    assert updated.name == "Lamp"


def test_update_product_can_drop_stock_control(products, admin, make_product):
    lamp = make_product("Lamp", "30.50", stock=4)

    updated = products.update_product(admin.id, lamp.id, ProductUpdate(stock_quantity=None))

    assert updated.stock_quantity is None


def test_update_missing_product(products, admin):
    with pytest.raises(NotFound):
        products.update_product(admin.id, 77, ProductUpdate(name="x"))


def test_list_products_paginates(products, make_product):
    for name in ("A", "B", "C"):
        make_product(name, "1.00", stock=1)

    page = products.list_products(limit=2, offset=1)

    assert [p.name for p in page["products"]] == ["B", "C"]
    assert page["pagination"] == {"total": 3, "limit": 2, "offset": 1}


def test_out_of_stock_report(products, admin, make_product):
    make_product("Zebra", "1.00", stock=0)
    make_product("Apple", "1.00", stock=0)
    make_product("Plenty", "1.00", stock=9)
    make_product("Unmanaged", "1.00", stock=None)

    report = products.list_out_of_stock(admin.id)

    assert [p.name for p in report["products"]] == ["Apple", "Zebra"]
    assert report["pagination"]["total"] == 2


def test_get_missing_product(products):
    with pytest.raises(NotFound):
        products.get_product(1)


def test_product_created_without_stock_control_stays_unmanaged(db, products, admin, make_user):
    make_user(1)

    card = products.create_product(
        admin.id, ProductCreate(name="Gift card", price=Decimal("50.00"), stock_quantity=None)
    )

    assert card.stock_quantity is None
    assert products.get_product(card.id).stock_quantity is None
    cart = CartService(db).add_item(1, card.id, 1)
    assert cart["items"][0]["quantity"] == 1
    assert products.list_out_of_stock(admin.id)["pagination"]["total"] == 0


def test_stock_defaults_to_zero_when_omitted(products, admin):
    lamp = products.create_product(admin.id, ProductCreate(name="Lamp", price=Decimal("30.50")))

    assert lamp.stock_quantity == 0


def test_price_is_stored_rounded_half_up(make_product, products):
    sticker = make_product("Sticker", "5.005", stock=1)

    assert products.get_product(sticker.id).price == Decimal("5.01")


def test_list_products_in_stock_only(products, make_product):
    make_product("Sold out", "1.00", stock=0)
    plenty = make_product("Plenty", "1.00", stock=3)
    card = make_product("Gift card", "1.00", stock=None)

    page = products.list_products(in_stock=True)

    assert [p.id for p in page["products"]] == [plenty.id, card.id]
    assert page["pagination"]["total"] == 2


def test_list_by_category(products, make_product, make_category):
    lamps = make_category("Lamps")
    desks = make_category("Desks")
    make_product("Floor lamp", "80.00", stock=2, category=lamps)
    make_product("Desk lamp", "20.00", stock=0, category=lamps)
    make_product("Desk", "200.00", stock=1, category=desks)

    all_lamps = products.list_by_category(lamps.id)
    available = products.list_by_category(lamps.id, in_stock=True)

    assert [p.name for p in all_lamps["products"]] == ["Floor lamp", "Desk lamp"]
    assert [p.name for p in available["products"]] == ["Floor lamp"]
    with pytest.raises(NotFound):
        products.list_by_category(999)


def test_create_product_in_unknown_category(products, admin):
    with pytest.raises(NotFound):
        products.create_product(
            admin.id, ProductCreate(name="Lamp", price=Decimal("1.00"), category_id=5)
        )


def test_move_product_to_category(products, admin, make_product, make_category):
    lamps = make_category("Lamps")
    lamp = make_product("Lamp", "30.50", stock=4)

    moved = products.update_product(admin.id, lamp.id, ProductUpdate(category_id=lamps.id))

    assert moved.category_id == lamps.id


def test_delete_product_leaves_carts_keeps_orders(db, products, order_service, admin, make_user, make_product, put_in_cart):
    buyer = make_user(1)
    lamp = make_product("Lamp", "30.50", stock=4)
    put_in_cart(buyer, lamp, 1)
    order = order_service.place_order(1)
    put_in_cart(buyer, lamp, 2)

    deleted = products.delete_product(admin.id, lamp.id)

    assert deleted.name == "Lamp"
    with pytest.raises(NotFound):
        products.get_product(lamp.id)
    assert db.query(CartItemModel).count() == 0
    line = db.query(OrderItemModel).filter_by(order_id=order["id"]).one()
    assert line.product_id is None
    assert line.unit_price == Decimal("30.50")


def test_delete_product_requires_admin(products, admin, make_user, make_product):
    make_user(1)
    lamp = make_product("Lamp", "30.50", stock=4)

    with pytest.raises(Forbidden):
        products.delete_product(1, lamp.id)
    assert products.get_product(lamp.id).name == "Lamp"
    with pytest.raises(NotFound):
        products.delete_product(admin.id, 999)
