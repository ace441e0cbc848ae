import pytest

from stall.cart import Cart


def test_plain_item_added_twice_merges_into_one_line(catalog):
    cart = Cart(catalog)
    bhel = catalog.menu_item("bhel")

    cart.add_item(bhel)
    cart.add_item(bhel)

    assert len(cart) == 1
    assert cart.lines[0].quantity == 2
    assert cart.total() == 60


def test_customized_items_never_merge(catalog):
    cart = Cart(catalog)
    frankie = catalog.menu_item("frankie")

    first = cart.add_item(frankie, selections=["paneer"])
    second = cart.add_item(frankie, selections=["paneer"])

    assert len(cart) == 2
    assert first.instance_id != second.instance_id
    assert first.selected_ingredient_ids == second.selected_ingredient_ids == ("paneer",)


def test_customized_price_scenario(catalog):
    cart = Cart(catalog)
    line = cart.add_item(catalog.menu_item("frankie"), quantity=3, selections=["paneer", "mushroom"])

    assert line.unit_price == 90
    assert line.line_total == 270
    assert cart.total() == 270


def test_default_selections_come_from_catalog(catalog):
    cart = Cart(catalog)
    line = cart.add_item(catalog.menu_item("frankie"))

    assert line.selected_ingredient_ids == catalog.default_ingredient_ids()
    assert line.unit_price == 60


def test_selections_are_kept_in_catalog_order(catalog):
    cart = Cart(catalog)
    line = cart.add_item(catalog.menu_item("mix-chips"), selections=["paneer", "onion", "onion", "unknown"])

    assert line.selected_ingredient_ids == ("onion", "paneer")


def test_add_then_remove_restores_total(catalog):
    cart = Cart(catalog)
    cart.add_item(catalog.menu_item("bhel"), quantity=2)
    before = cart.total()

    line = cart.add_item(catalog.menu_item("frankie"), selections=["cheese"])
    assert cart.total() == before + 75
    cart.remove_item(line.instance_id)

    assert cart.total() == before


def test_change_quantity_to_zero_removes_line(catalog):
    cart = Cart(catalog)
    line = cart.add_item(catalog.menu_item("bhel"))

    cart.change_quantity(line.instance_id, 2)
    assert cart.lines[0].quantity == 3

    cart.change_quantity(line.instance_id, -3)
    assert cart.is_empty


def test_unknown_instance_ids_are_ignored(catalog):
    cart = Cart(catalog)
    cart.add_item(catalog.menu_item("bhel"))

    cart.remove_item("missing")
    cart.change_quantity("missing", -5)

    assert len(cart) == 1
    assert cart.total() == 30


def test_quantity_must_be_positive(catalog):
    cart = Cart(catalog)
    with pytest.raises(ValueError):
        cart.add_item(catalog.menu_item("bhel"), quantity=0)


def test_unit_price_is_fixed_when_added(catalog):
    cart = Cart(catalog)
    line = cart.add_item(catalog.menu_item("frankie"), selections=["paneer"])
    cart.add_item(catalog.menu_item("bhel"))

    assert cart.get(line.instance_id).unit_price == 80


def test_snapshot_copies_lines(catalog):
    cart = Cart(catalog)
    cart.add_item(catalog.menu_item("bhel"), notes="extra sev")
    cart.add_item(catalog.menu_item("frankie"), selections=["paneer"])

    snapshot = cart.snapshot()
    cart.clear()

    assert cart.is_empty
    assert [(line.name, line.quantity, line.price) for line in snapshot] == [("Bhel Puri", 1, 30), ("Frankie", 1, 80)]
    assert snapshot[0].customizations is None
    assert snapshot[0].notes == "extra sev"
    assert snapshot[1].customizations == ("paneer",)
