"""Main Textual app class."""

from __future__ import annotations

import logging
from uuid import uuid4

from textual.app import App
from textual.binding import Binding

from stall.checkout_modal import TerminalCheckoutGateway
from stall.config import Settings
from stall.customer_screen import CustomerScreen
from stall.data import DEFAULT_CATALOG, Catalog
from stall.errors import ConfigurationUnavailable, StoreError
from stall.kitchen import KitchenDisplayFlow
from stall.kitchen_screen import KitchenScreen
from stall.ordering import CustomerOrderingFlow
from stall.payment import PaymentGateway
from stall.persistence import OrderStore, SqliteOrderStore
from stall.staff_gate import StaffGate
from stall.staff_gate_modal import StaffGateModal

logger = logging.getLogger(__name__)


def open_store(settings: Settings) -> SqliteOrderStore:
    """Open the configured order store, or raise ConfigurationUnavailable."""
    store = SqliteOrderStore(settings.db_path)
    try:
        store.bootstrap_schema()
    except StoreError as exc:
        raise ConfigurationUnavailable(f"Order service unavailable: {exc}") from exc
    return store


class StallApp(App):
    """Customer ordering with a password-gated kitchen display."""

    BINDINGS = [
        Binding("ctrl+k", "staff_view", "Staff view", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        settings: Settings,
        store: OrderStore | None = None,
        gateway: PaymentGateway | None = None,
        catalog: Catalog = DEFAULT_CATALOG,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.catalog = catalog
        self.title = settings.business_name
        self.sub_title = "Order & Track"
        self.startup_notice = ""

        if store is None:
            try:
                store = open_store(settings)
            except ConfigurationUnavailable as exc:
                logger.error("store_unavailable error=%s", exc)
                self.startup_notice = f"{exc}. Browsing only."
        self.store = store
        self.gateway = gateway if gateway is not None else TerminalCheckoutGateway(self)
        self.staff_gate = StaffGate(settings.staff_password)
        self.customer_flow = CustomerOrderingFlow(
            catalog,
            store,
            self.gateway,
            customer_id=uuid4().hex,
            currency=settings.currency,
            business_name=settings.business_name,
            description=settings.payment_description,
            pickup_address=settings.pickup_address,
        )

    def on_mount(self) -> None:
        self.push_screen(CustomerScreen(self.customer_flow, notice=self.startup_notice))
        if self.store is not None:
            self.set_interval(self.settings.poll_interval, self._poll_store)

    def on_unmount(self) -> None:
        self.customer_flow.close()
        close = getattr(self.store, "close", None)
        if close is not None:
            close()

    def _poll_store(self) -> None:
        try:
            self.store.poll()
        except StoreError as exc:
            logger.warning("poll_failed error=%s", exc)

    def action_staff_view(self) -> None:
        if isinstance(self.screen, (KitchenScreen, StaffGateModal)):
            return
        self.push_screen(StaffGateModal(), callback=self._on_staff_password)

    def _on_staff_password(self, password: str | None) -> None:
        if password is None:
            return
        if not self.staff_gate.admit(password):
            self.notify("Incorrect password. Access denied.", severity="error")
            return
        if self.store is None:
            self.notify("Order service unavailable.", severity="error")
            return
        logger.info("staff_view_opened")
        self.push_screen(KitchenScreen(KitchenDisplayFlow(self.store), self.catalog))
