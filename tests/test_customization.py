from stall.customization import Customization


def test_starts_with_defaults_and_quantity_one(catalog):
    customization = Customization.start(catalog.menu_item("frankie"), catalog)

    assert customization.quantity == 1
    assert customization.selection() == catalog.default_ingredient_ids()
    assert customization.unit_price == 60


def test_decrement_is_clamped_at_one(catalog):
    customization = Customization.start(catalog.menu_item("frankie"), catalog)

    customization.decrement()
    customization.decrement()
    assert customization.quantity == 1

    customization.increment()
    assert customization.quantity == 2


def test_quick_add_all_replaces_selection(catalog):
    customization = Customization.start(catalog.menu_item("frankie"), catalog)
    customization.toggle("onion")

    customization.quick_add_all()

    assert set(customization.selection()) == {i.ingredient_id for i in catalog.all_ingredients()}
    assert customization.unit_price == 60 + 10 + 15 + 20 + 10 + 10


def test_toggle_free_ingredient_keeps_price(catalog):
    customization = Customization.start(catalog.menu_item("mix-chips"), catalog)
    before = customization.unit_price

    customization.toggle("onion")

    assert "onion" not in customization.selected
    assert customization.unit_price == before


def test_toggle_unknown_ingredient_is_ignored(catalog):
    customization = Customization.start(catalog.menu_item("frankie"), catalog)
    customization.toggle("truffle")

    assert "truffle" not in customization.selected


def test_line_total(catalog):
    customization = Customization.start(catalog.menu_item("frankie"), catalog)
    customization.toggle("paneer")
    customization.toggle("mushroom")
    customization.increment()
    customization.increment()

    assert customization.unit_price == 90
    assert customization.line_total == 270
