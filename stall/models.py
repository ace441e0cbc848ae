"""Domain models for stall-order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from stall.lifecycle import OrderStatus


@dataclass(frozen=True)
class Ingredient:
    """A selectable ingredient for customizable menu items."""

    ingredient_id: str
    name: str
    price: int
    default_included: bool = False

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Ingredient {self.ingredient_id!r} has a negative price")


@dataclass(frozen=True)
class IngredientCategory:
    """A named group of ingredients shown together while customizing."""

    key: str
    label: str
    ingredients: tuple[Ingredient, ...]


@dataclass(frozen=True)
class MenuItem:
    """A menu item as offered at the stall."""

    item_id: str
    name: str
    base_price: int
    category: str
    customizable: bool = False

    def __post_init__(self) -> None:
        if self.base_price < 0:
            raise ValueError(f"Menu item {self.item_id!r} has a negative price")


@dataclass(frozen=True)
class CartLineItem:
    """One priced configuration of a menu item in the cart."""

    instance_id: str
    menu_item_id: str
    name: str
    quantity: int
    unit_price: int
    selected_ingredient_ids: tuple[str, ...] | None = None
    notes: str | None = None

    @property
    def is_customized(self) -> bool:
        return self.selected_ingredient_ids is not None

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderLine:
    """Simplified line copied into a placed order."""

    name: str
    quantity: int
    price: int
    customizations: tuple[str, ...] | None = None
    notes: str | None = None


@dataclass(frozen=True)
class OrderDraft:
    """Everything needed to create an order once payment has succeeded."""

    order_number: int
    customer_id: str
    lines: tuple[OrderLine, ...]
    total: int
    payment_ref: str

    def __post_init__(self) -> None:
        if not self.payment_ref:
            raise ValueError("An order cannot be created without a payment reference")
        if not self.lines:
            raise ValueError("An order needs at least one line")


@dataclass(frozen=True)
class Order:
    """A placed order as held by the order store."""

    order_id: str
    order_number: int
    customer_id: str
    lines: tuple[OrderLine, ...]
    total: int
    status: OrderStatus
    created_at: datetime | None
    payment_ref: str
