"""Unit and cart pricing."""

from __future__ import annotations

from typing import Iterable

from stall.models import CartLineItem, Ingredient


def compute_unit_price(base_price: int, selected_ingredient_ids: Iterable[str], ingredients: Iterable[Ingredient]) -> int:
    """Base price plus every selected paid ingredient, each counted once.

    Unknown ids are ignored so carts survive catalog edits.
    """
    prices = {ingredient.ingredient_id: ingredient.price for ingredient in ingredients}
    extras = sum(prices.get(ingredient_id, 0) for ingredient_id in set(selected_ingredient_ids))
    return base_price + extras


def compute_cart_total(lines: Iterable[CartLineItem]) -> int:
    """Sum of unit price times quantity; lines with a non-positive quantity count as zero."""
    return sum(line.unit_price * line.quantity for line in lines if line.quantity > 0)


def to_minor_units(amount: int) -> int:
    """Convert rupees to paise for the checkout request."""
    return amount * 100
