"""Kitchen display screen for staff."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Header, Static

from stall.data import Catalog
from stall.kitchen import KitchenDisplayFlow, KitchenState, action_for, is_highlighted
from stall.rendering import format_order_header, format_order_line


class KitchenScreen(Screen):
    """Live order queue, newest first, with one forward action per order."""

    CSS = """
    #kitchen-orders {
        height: 1fr;
        border: round $primary;
        padding: 0 1;
    }

    #kitchen-help {
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("up", "move_selection(-1)", "Previous order"),
        ("down", "move_selection(1)", "Next order"),
        ("enter", "advance_selected", "Advance"),
        ("escape", "leave", "Customer view"),
    ]

    def __init__(self, flow: KitchenDisplayFlow, catalog: Catalog) -> None:
        super().__init__()
        self.flow = flow
        self.catalog = catalog
        self.selected_index = 0
        self._remove_listener = None

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="kitchen-orders"):
            yield Static(id="kitchen-list")
        yield Static("↑/↓ select, Enter advance status, Esc back to customer view", id="kitchen-help")

    def on_mount(self) -> None:
        self._remove_listener = self.flow.add_listener(self._on_state)
        self.flow.start()
        self._refresh_orders()

    def on_unmount(self) -> None:
        self.flow.stop()
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None

    def _on_state(self, state: KitchenState) -> None:
        self._refresh_orders()

    def action_move_selection(self, delta: int) -> None:
        orders = self.flow.state.orders
        if not orders:
            return
        self.selected_index = (self.selected_index + delta) % len(orders)
        self._refresh_orders()

    def action_advance_selected(self) -> None:
        orders = self.flow.state.orders
        if not (0 <= self.selected_index < len(orders)):
            return
        self.flow.advance(orders[self.selected_index].order_id)

    def action_leave(self) -> None:
        self.app.pop_screen()

    def _refresh_orders(self) -> None:
        try:
            widget = self.query_one("#kitchen-list", Static)
        except NoMatches:
            return

        state = self.flow.state
        if state.loading:
            widget.update("Loading Orders...")
            return
        if not state.orders:
            widget.update("No active orders yet. Time for a coffee break!")
            return

        if self.selected_index >= len(state.orders):
            self.selected_index = len(state.orders) - 1

        text = Text()
        for idx, order in enumerate(state.orders):
            if idx > 0:
                text.append("\n\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            text.append(pointer, style="bold #f0b429" if is_highlighted(order) else "")
            text.append_text(format_order_header(order))
            if is_highlighted(order):
                text.append("  NEW!", style="bold blink #ff5f5f")
            for line in order.lines:
                text.append("\n    ")
                text.append_text(format_order_line(line, self.catalog))
            action = action_for(order)
            text.append("\n    ")
            if action.enabled:
                text.append(f"[ {action.label} ]", style="bold #5fbf72" if idx == self.selected_index else "#5fbf72")
            else:
                text.append(f"[ {action.label} ]", style="dim")
        widget.update(text)
