"""In-memory cart for a single customer session."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable
from uuid import uuid4

from stall.data import Catalog
from stall.models import CartLineItem, MenuItem, OrderLine
from stall.pricing import compute_cart_total, compute_unit_price

logger = logging.getLogger(__name__)


class Cart:
    """Ordered cart lines.

    Non-customizable items share one line per menu item; every customized
    addition gets its own line, even when the selections are identical. Unit
    prices are fixed when a line is created.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._lines: list[CartLineItem] = []

    @property
    def lines(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get(self, instance_id: str) -> CartLineItem | None:
        for line in self._lines:
            if line.instance_id == instance_id:
                return line
        return None

    def add_item(
        self,
        menu_item: MenuItem,
        quantity: int = 1,
        selections: Iterable[str] | None = None,
        notes: str | None = None,
    ) -> CartLineItem:
        """Add ``quantity`` of ``menu_item`` and return the affected line."""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        if not menu_item.customizable:
            for idx, line in enumerate(self._lines):
                if line.menu_item_id == menu_item.item_id and not line.is_customized:
                    merged = replace(line, quantity=line.quantity + quantity)
                    self._lines[idx] = merged
                    logger.debug("cart_merge item=%s quantity=%d", menu_item.item_id, merged.quantity)
                    return merged
            line = CartLineItem(
                instance_id=uuid4().hex,
                menu_item_id=menu_item.item_id,
                name=menu_item.name,
                quantity=quantity,
                unit_price=menu_item.base_price,
                notes=notes,
            )
        else:
            if selections is None:
                selections = self.catalog.default_ingredient_ids()
            selected = self.catalog.ordered_selection(selections)
            line = CartLineItem(
                instance_id=f"{menu_item.item_id}-{uuid4().hex[:12]}",
                menu_item_id=menu_item.item_id,
                name=menu_item.name,
                quantity=quantity,
                unit_price=compute_unit_price(menu_item.base_price, selected, self.catalog.all_ingredients()),
                selected_ingredient_ids=selected,
                notes=notes,
            )

        self._lines.append(line)
        logger.debug("cart_add item=%s instance=%s unit_price=%d", menu_item.item_id, line.instance_id, line.unit_price)
        return line

    def remove_item(self, instance_id: str) -> None:
        self._lines = [line for line in self._lines if line.instance_id != instance_id]

    def change_quantity(self, instance_id: str, delta: int) -> None:
        """Adjust a line's quantity; a result of zero or less drops the line."""
        for idx, line in enumerate(self._lines):
            if line.instance_id != instance_id:
                continue
            new_quantity = line.quantity + delta
            if new_quantity <= 0:
                del self._lines[idx]
            else:
                self._lines[idx] = replace(line, quantity=new_quantity)
            return

    def clear(self) -> None:
        self._lines.clear()

    def total(self) -> int:
        return compute_cart_total(self._lines)

    def snapshot(self) -> tuple[OrderLine, ...]:
        """Copy the cart into the simplified lines stored with an order."""
        return tuple(
            OrderLine(
                name=line.name,
                quantity=line.quantity,
                price=line.unit_price,
                customizations=line.selected_ingredient_ids,
                notes=line.notes,
            )
            for line in self._lines
        )
