"""Working state while a customer customizes one menu item."""

from __future__ import annotations

from dataclasses import dataclass, field

from stall.data import Catalog
from stall.models import MenuItem
from stall.pricing import compute_unit_price


@dataclass
class Customization:
    item: MenuItem
    catalog: Catalog
    quantity: int = 1
    selected: set[str] = field(default_factory=set)
    notes: str | None = None

    @classmethod
    def start(cls, item: MenuItem, catalog: Catalog) -> Customization:
        """Open a customization with the catalog's default ingredients selected."""
        return cls(item=item, catalog=catalog, selected=set(catalog.default_ingredient_ids()))

    def toggle(self, ingredient_id: str) -> None:
        if self.catalog.ingredient(ingredient_id) is None:
            return
        if ingredient_id in self.selected:
            self.selected.remove(ingredient_id)
        else:
            self.selected.add(ingredient_id)

    def quick_add_all(self) -> None:
        """Select every ingredient, replacing earlier toggles."""
        self.selected = {ingredient.ingredient_id for ingredient in self.catalog.all_ingredients()}

    def increment(self) -> None:
        self.quantity += 1

    def decrement(self) -> None:
        self.quantity = max(1, self.quantity - 1)

    def selection(self) -> tuple[str, ...]:
        return self.catalog.ordered_selection(self.selected)

    @property
    def unit_price(self) -> int:
        return compute_unit_price(self.item.base_price, self.selected, self.catalog.all_ingredients())

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity
