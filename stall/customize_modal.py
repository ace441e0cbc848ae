"""Ingredient customization modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from stall.customization import Customization
from stall.rendering import format_price


class CustomizeModal(ModalScreen[bool]):
    """Toggle ingredients and pick a quantity; dismisses True to add to cart."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("up", "move_cursor(-1)", "Up"),
        ("down", "move_cursor(1)", "Down"),
        ("space", "toggle_current", "Toggle"),
        ("enter", "confirm", "Add to cart"),
    ]

    CSS = """
    CustomizeModal {
        align: center middle;
        background: $background 60%;
    }

    #customize-dialog {
        width: 60;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #customize-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #customize-footer {
        margin-top: 1;
    }

    #customize-help {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, customization: Customization) -> None:
        super().__init__()
        self.customization = customization
        self.cursor_index = 0
        self._ingredient_ids = [i.ingredient_id for i in customization.catalog.all_ingredients()]

    def compose(self) -> ComposeResult:
        with Container(id="customize-dialog"):
            yield Static(f"Customize Your {self.customization.item.name}", id="customize-title")
            yield Static(id="customize-body")
            yield Static(id="customize-footer")
            yield Static("↑/↓ move, Space toggle, A quick add all, +/- quantity, Enter add, Esc cancel", id="customize-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.character in {"j", "k"}:
            self.action_move_cursor(1 if event.character == "j" else -1)
            event.stop()
            return
        if event.character in {"a", "A"}:
            self.customization.quick_add_all()
            self._refresh_content()
            event.stop()
            return
        if event.character == "+":
            self.customization.increment()
            self._refresh_content()
            event.stop()
            return
        if event.character == "-":
            self.customization.decrement()
            self._refresh_content()
            event.stop()

    def action_cancel(self) -> None:
        self.dismiss(False)

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_move_cursor(self, delta: int) -> None:
        if not self._ingredient_ids:
            return
        self.cursor_index = (self.cursor_index + delta) % len(self._ingredient_ids)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        if not self._ingredient_ids:
            return
        self.customization.toggle(self._ingredient_ids[self.cursor_index])
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = self.query_one("#customize-body", Static)
        footer = self.query_one("#customize-footer", Static)
        current_id = self._ingredient_ids[self.cursor_index] if self._ingredient_ids else None

        content = Text()
        for cat_idx, category in enumerate(self.customization.catalog.categories):
            if cat_idx > 0:
                content.append("\n")
            content.append(f"{category.label}\n", style="bold underline")
            for ingredient in category.ingredients:
                pointer = "➤ " if ingredient.ingredient_id == current_id else "  "
                is_checked = ingredient.ingredient_id in self.customization.selected
                checked = "[x]" if is_checked else "[ ]"
                style = "bold #5fbf72" if is_checked else "white"
                content.append(f"{pointer}{checked} {ingredient.name}", style=style)
                if ingredient.price > 0:
                    content.append(f" (+{format_price(ingredient.price)})", style="#f0b429")
                content.append("\n")
        body.update(content)

        summary = Text()
        summary.append(f"Quantity: {self.customization.quantity}   ")
        summary.append(f"Total: {format_price(self.customization.line_total)}", style="bold")
        summary.append(f"\nAdd {self.customization.quantity} {self.customization.item.name} to Cart", style="bold #5fbf72")
        footer.update(summary)
