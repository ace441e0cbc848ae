"""Terminal stand-in for the hosted checkout widget."""

from __future__ import annotations

import logging
from typing import Callable
from uuid import uuid4

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from stall.events import PaymentDismissed, PaymentFailed, PaymentOutcome, PaymentSucceeded
from stall.payment import CheckoutRequest

logger = logging.getLogger(__name__)


class CheckoutModal(ModalScreen[PaymentOutcome]):
    """Shows the amount due and resolves to exactly one payment outcome."""

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 52;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #checkout-help {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, request: CheckoutRequest) -> None:
        super().__init__()
        self.request = request
        self._resolved = False

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static(self.request.business_name, id="checkout-title")
            yield Static(self._summary(), id="checkout-body")
            yield Static("P pay, D decline, Esc close", id="checkout-help")

    def _summary(self) -> Text:
        text = Text()
        text.append(f"{self.request.description}\n")
        major, minor = divmod(self.request.amount_minor_units, 100)
        text.append(f"Amount: {self.request.currency_code} {major}.{minor:02d}", style="bold")
        address = self.request.notes.get("address")
        if address:
            text.append(f"\nPickup: {address}", style="dim")
        return text

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self._resolve(PaymentDismissed())
        elif event.character in {"p", "P"}:
            self._resolve(PaymentSucceeded(payment_ref=f"pay_{uuid4().hex[:14]}"))
        elif event.character in {"d", "D"}:
            self._resolve(PaymentFailed(reason="Payment declined by issuer"))
        else:
            return
        event.stop()

    def _resolve(self, outcome: PaymentOutcome) -> None:
        if self._resolved:
            return
        self._resolved = True
        self.dismiss(outcome)


class TerminalCheckoutGateway:
    """Payment gateway that collects the outcome through :class:`CheckoutModal`."""

    def __init__(self, app: App) -> None:
        self.app = app

    def open_checkout(self, request: CheckoutRequest, on_complete: Callable[[PaymentOutcome], None]) -> None:
        logger.info("checkout_modal_open amount=%d currency=%s", request.amount_minor_units, request.currency_code)
        self.app.push_screen(CheckoutModal(request), callback=on_complete)
