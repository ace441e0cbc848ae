"""Customer menu, cart and order tracking screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Header, Static

from stall.customize_modal import CustomizeModal
from stall.errors import ConfigurationUnavailable, OrderPersistenceFailure, PaymentAbandoned
from stall.lifecycle import customer_message
from stall.ordering import CustomerOrderingFlow, CustomerState, Phase
from stall.rendering import format_cart_line, format_price, status_badge


class CustomerScreen(Screen):
    """Menu on the left, cart on the right; replaced by the tracker once an order is placed."""

    CSS = """
    #customer-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #tracking-pane {
        border: round $primary;
        padding: 1 2;
        height: 1fr;
    }

    #menu-list, #cart-list {
        height: 1fr;
    }

    #notice {
        height: auto;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        ("up", "move_menu(-1)", "Previous item"),
        ("down", "move_menu(1)", "Next item"),
        ("enter", "select_item", "Add"),
    ]

    def __init__(self, flow: CustomerOrderingFlow, notice: str = "") -> None:
        super().__init__()
        self.flow = flow
        self.startup_notice = notice
        self.menu_index = 0
        self.cart_index: int | None = None
        self._remove_listener = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="customer-layout"):
            with Vertical(id="menu-pane"):
                yield Static("Menu", classes="pane-title")
                yield Static(id="menu-list")
            with Vertical(id="cart-pane"):
                yield Static("Your Cart", classes="pane-title")
                yield Static(id="cart-list")
                yield Static(id="checkout-line")
        with Vertical(id="tracking-pane"):
            yield Static(id="tracking-body")
        yield Static(id="notice")

    def on_mount(self) -> None:
        self._remove_listener = self.flow.add_listener(self._on_state)
        self._refresh_all()

    def on_unmount(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None

    def _on_state(self, state: CustomerState) -> None:
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        key = event.character
        if key is None:
            return
        if self.flow.state.phase == Phase.TRACKING:
            if key in {"n", "N"}:
                self.flow.start_new_order()
                event.stop()
            return

        if key == "j":
            self._move_cart_selection(1)
        elif key == "k":
            self._move_cart_selection(-1)
        elif key == "+":
            self._change_selected_quantity(1)
        elif key == "-":
            self._change_selected_quantity(-1)
        elif key == "d":
            line = self._selected_line()
            if line is not None:
                self.flow.remove_item(line.instance_id)
        elif key == "r":
            if self.flow.state.phase == Phase.CART_REVIEW:
                self.flow.back_to_menu()
            else:
                self.flow.review_cart()
        elif key == "p":
            self.flow.place_order()
        elif key == "x":
            self.flow.dismiss_error()
        else:
            return
        event.stop()

    def action_move_menu(self, delta: int) -> None:
        menu = self.flow.catalog.menu
        if not menu or self.flow.state.phase == Phase.TRACKING:
            return
        self.menu_index = (self.menu_index + delta) % len(menu)
        self._refresh_menu()

    def action_select_item(self) -> None:
        if self.flow.state.phase == Phase.TRACKING:
            return
        menu = self.flow.catalog.menu
        if not menu:
            return
        self.flow.select_item(menu[self.menu_index].item_id)
        customization = self.flow.state.customization
        if self.flow.state.phase == Phase.CUSTOMIZING and customization is not None:
            self.app.push_screen(CustomizeModal(customization), callback=self._on_customized)

    def _on_customized(self, add: bool | None) -> None:
        if add:
            self.flow.finish_customization()
        else:
            self.flow.cancel_customization()

    def _selected_line(self):
        lines = self.flow.cart.lines
        if self.cart_index is None or not (0 <= self.cart_index < len(lines)):
            return None
        return lines[self.cart_index]

    def _move_cart_selection(self, delta: int) -> None:
        lines = self.flow.cart.lines
        if not lines:
            self.cart_index = None
        elif self.cart_index is None:
            self.cart_index = 0 if delta > 0 else len(lines) - 1
        else:
            self.cart_index = (self.cart_index + delta) % len(lines)
        self._refresh_cart()

    def _change_selected_quantity(self, delta: int) -> None:
        line = self._selected_line()
        # Customized lines are removed and re-added rather than resized.
        if line is None or line.is_customized:
            return
        self.flow.change_quantity(line.instance_id, delta)

    def _refresh_all(self) -> None:
        try:
            tracking = self.flow.state.phase == Phase.TRACKING
            self.query_one("#customer-layout").display = not tracking
            self.query_one("#tracking-pane").display = tracking
        except NoMatches:
            return
        self._refresh_menu()
        self._refresh_cart()
        self._refresh_tracking()
        self._refresh_notice()

    def _refresh_menu(self) -> None:
        menu_widget = self.query_one("#menu-list", Static)
        lines = Text()
        for idx, item in enumerate(self.flow.catalog.menu):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.menu_index else "  "
            lines.append(pointer)
            lines.append(item.name, style="bold")
            lines.append(f"  {format_price(item.base_price)}")
            lines.append(f"  [{item.category}]", style="dim")
            if item.customizable:
                lines.append("  customize", style="italic #f0b429")
        menu_widget.update(lines)

    def _refresh_cart(self) -> None:
        cart_widget = self.query_one("#cart-list", Static)
        checkout_widget = self.query_one("#checkout-line", Static)
        cart_lines = self.flow.cart.lines
        if self.cart_index is not None and self.cart_index >= len(cart_lines):
            self.cart_index = len(cart_lines) - 1 if cart_lines else None

        if not cart_lines:
            cart_widget.update("Your cart is empty. Start adding some delicious food!")
        else:
            text = Text()
            for idx, line in enumerate(cart_lines):
                if idx > 0:
                    text.append("\n")
                text.append("➤ " if idx == self.cart_index else "  ")
                text.append_text(format_cart_line(line, self.flow.catalog))
            cart_widget.update(text)

        total = format_price(self.flow.cart.total())
        if self.flow.is_placing_order:
            checkout_widget.update(Text("Processing Payment...", style="bold"))
        elif self.flow.checkout_enabled:
            checkout_widget.update(Text(f"P  Confirm & Pay {total}", style="bold #5fbf72"))
        else:
            checkout_widget.update(Text(f"Confirm & Pay {total}", style="dim strike"))

    def _refresh_tracking(self) -> None:
        body = self.query_one("#tracking-body", Static)
        state = self.flow.state
        if state.phase != Phase.TRACKING:
            body.update("")
            return
        text = Text()
        order = state.current_order
        if order is not None:
            text.append(f"Order # {order.order_number}\n\n", style="bold")
        text.append_text(status_badge(state.current_status))
        text.append(f"\n\n{customer_message(state.current_status)}\n\n")
        text.append("Keep this screen open to track your order status live!\n", style="dim")
        text.append("Press N to start a new order.", style="dim")
        body.update(text)

    def _refresh_notice(self) -> None:
        notice = self.query_one("#notice", Static)
        error = self.flow.state.error
        if isinstance(error, OrderPersistenceFailure):
            notice.update(Text(str(error), style="bold #ffffff on #b23a48"))
        elif isinstance(error, PaymentAbandoned):
            notice.update(Text(str(error), style="dim"))
        elif error is not None and (error.user_visible or isinstance(error, ConfigurationUnavailable)):
            notice.update(Text(f"{error}  (X to dismiss)", style="bold #ffb3b3"))
        elif self.startup_notice:
            notice.update(Text(self.startup_notice, style="bold #ffb3b3"))
        else:
            notice.update(Text("↑/↓ menu, Enter add, J/K cart, +/- qty, D remove, P pay, R review, Ctrl+K staff", style="dim"))
