import pytest

from storefront.domain.errors import BadRequest, Conflict, Forbidden, NotFound
from storefront.domain.schemas import CategoryCreate, CategoryUpdate
from storefront.services.category_service import CategoryService


@pytest.fixture
def categories(db):
    return CategoryService(db)


def test_create_and_list_sorted_by_name(categories, admin):
    categories.create_category(admin.id, CategoryCreate(name="Lamps"))
    categories.create_category(admin.id, CategoryCreate(name="Desks", description="Work surfaces"))

    page = categories.list_categories()

    assert [c.name for c in page["categories"]] == ["Desks", "Lamps"]
    assert page["pagination"] == {"total": 2, "limit": 20, "offset": 0}


def test_duplicate_name_conflicts(categories, admin):
    categories.create_category(admin.id, CategoryCreate(name="Lamps"))

    with pytest.raises(Conflict):
        categories.create_category(admin.id, CategoryCreate(name="Lamps"))


def test_client_cannot_create(categories, make_user):
    make_user(1)

    with pytest.raises(Forbidden):
        categories.create_category(1, CategoryCreate(name="Lamps"))


def test_detail_counts_products(categories, make_category, make_product):
    lamps = make_category("Lamps")
    make_product("Floor lamp", "80.00", stock=2, category=lamps)
    make_product("Desk lamp", "20.00", stock=1, category=lamps)
    make_product("Desk", "200.00", stock=1)

    detail = categories.get_category(lamps.id)

    assert detail["name"] == "Lamps"
    assert detail["product_count"] == 2
    assert sorted(p.name for p in detail["products"]) == ["Desk lamp", "Floor lamp"]
    with pytest.raises(NotFound):
        categories.get_category(999)


def test_update_renames_and_rejects_taken_name(categories, admin, make_category):
    lamps = make_category("Lamps")
    make_category("Desks")

    renamed = categories.update_category(admin.id, lamps.id, CategoryUpdate(name="Lighting"))
    assert renamed.name == "Lighting"

    # same name is not a conflict with itself
    same = categories.update_category(admin.id, lamps.id, CategoryUpdate(name="Lighting", description="Light"))
    assert same.description == "Light"

    with pytest.raises(Conflict):
        categories.update_category(admin.id, lamps.id, CategoryUpdate(name="Desks"))


def test_delete_refused_while_products_remain(categories, admin, make_category, make_product):
    lamps = make_category("Lamps")
    make_product("Floor lamp", "80.00", stock=2, category=lamps)
    empty = make_category("Empty")

    with pytest.raises(BadRequest):
        categories.delete_category(admin.id, lamps.id)

    assert categories.delete_category(admin.id, empty.id).name == "Empty"
    assert categories.list_categories()["pagination"]["total"] == 1
    with pytest.raises(NotFound):
        categories.delete_category(admin.id, empty.id)
