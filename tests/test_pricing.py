from stall.models import CartLineItem, Ingredient
from stall.pricing import compute_cart_total, compute_unit_price, to_minor_units

INGREDIENTS = [
    Ingredient("onion", "Onion", 0, default_included=True),
    Ingredient("paneer", "Add Paneer", 20),
    Ingredient("mushroom", "Mushroom", 10),
    Ingredient("cheese", "Cheese (Extra)", 15),
]


def _line(unit_price, quantity):
    return CartLineItem(instance_id=f"l{unit_price}-{quantity}", menu_item_id="x", name="X", quantity=quantity, unit_price=unit_price)


def test_unit_price_adds_paid_ingredients():
    assert compute_unit_price(60, ["paneer", "mushroom"], INGREDIENTS) == 90


def test_line_total_for_three_customized_items():
    unit_price = compute_unit_price(60, ["paneer", "mushroom"], INGREDIENTS)
    assert unit_price * 3 == 270
    assert compute_cart_total([_line(unit_price, 3)]) == 270


def test_zero_price_ingredients_do_not_change_price():
    with_onion = compute_unit_price(60, ["onion", "paneer"], INGREDIENTS)
    without_onion = compute_unit_price(60, ["paneer"], INGREDIENTS)
    assert with_onion == without_onion == 80


def test_unknown_and_duplicate_ids_are_ignored():
    assert compute_unit_price(60, ["paneer", "paneer", "truffle"], INGREDIENTS) == 80


def test_price_never_decreases_as_paid_ingredients_are_added():
    paid = ["paneer", "mushroom", "cheese"]
    prices = [compute_unit_price(40, paid[:n], INGREDIENTS) for n in range(len(paid) + 1)]
    assert prices == sorted(prices)
    assert prices == [40, 60, 70, 85]


def test_cart_total_skips_non_positive_quantities():
    lines = [_line(30, 2), _line(90, 1), _line(50, 0), _line(50, -1)]
    assert compute_cart_total(lines) == 150


def test_empty_cart_total_is_zero():
    assert compute_cart_total([]) == 0


def test_minor_units():
    assert to_minor_units(150) == 15000
