"""Rendering helpers shared by the customer and kitchen screens."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from stall.config import CURRENCY_SYMBOL
from stall.data import Catalog
from stall.lifecycle import OrderStatus
from stall.models import CartLineItem, Order, OrderLine

STATUS_STYLES: dict[OrderStatus, str] = {
    OrderStatus.NEW: "bold #ffffff on #c0392b",
    OrderStatus.PREPARING: "bold #ffffff on #2f6db5",
    OrderStatus.READY: "bold #0b1f0f on #5fbf72",
    OrderStatus.COLLECTED: "bold #1d1d1d on #9e9e9e",
}


def format_price(amount: int, symbol: str = CURRENCY_SYMBOL) -> str:
    return f"{symbol}{amount:.2f}"


def status_badge(status: OrderStatus | None) -> Text:
    """Render a status as a colored badge."""
    if status is None:
        return Text(" ... ", style="bold on #444444")
    return Text(f" {status.value} ", style=STATUS_STYLES[status])


def format_time(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.astimezone().strftime("%H:%M")


def ingredient_names(ingredient_ids, catalog: Catalog) -> list[str]:
    names = []
    for ingredient_id in ingredient_ids:
        ingredient = catalog.ingredient(ingredient_id)
        names.append(ingredient.name if ingredient is not None else ingredient_id)
    return names


def format_cart_line(line: CartLineItem, catalog: Catalog) -> Text:
    """Render a cart line with quantity, price and any customization."""
    text = Text()
    text.append(f"{line.quantity} x {line.name}", style="bold")
    text.append(f"  {format_price(line.line_total)}")
    if line.selected_ingredient_ids is not None:
        names = ingredient_names(line.selected_ingredient_ids, catalog)
        text.append("\n      Custom: ", style="dim")
        text.append(", ".join(names) if names else "(plain)", style="dim")
    if line.notes:
        text.append(f"\n      Note: {line.notes}", style="italic")
    return text


def format_order_line(line: OrderLine, catalog: Catalog) -> Text:
    """Render one line of a placed order the way the kitchen reads it."""
    text = Text()
    text.append(f"{line.quantity} x {line.name}", style="bold")
    menu_item = catalog.menu_item_by_name(line.name)
    if menu_item is not None and line.price > menu_item.base_price:
        text.append(f"  (+{format_price(line.price - menu_item.base_price)} extras)", style="#f0b429")
    for ingredient_id in line.customizations or ():
        ingredient = catalog.ingredient(ingredient_id)
        if ingredient is None:
            text.append(f"\n      - {ingredient_id}", style="dim")
        elif ingredient.price > 0:
            text.append(f"\n      - {ingredient.name} (+{format_price(ingredient.price)})")
        else:
            text.append(f"\n      - {ingredient.name}", style="dim")
    if line.notes:
        text.append(f"\n      Note: {line.notes}", style="italic")
    return text


def format_order_header(order: Order) -> Text:
    text = Text()
    text.append(f"# {order.order_number}", style="bold")
    text.append(f"  {format_time(order.created_at)}  ", style="dim")
    text.append_text(status_badge(order.status))
    text.append(f"  {format_price(order.total)}")
    return text
