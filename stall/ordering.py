"""Customer ordering flow: menu, customization, cart, payment, tracking."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from stall.cart import Cart
from stall.config import (
    BUSINESS_NAME,
    CURRENCY,
    ORDER_NUMBER_MAX,
    ORDER_NUMBER_MIN,
    PAYMENT_DESCRIPTION,
    PICKUP_ADDRESS,
)
from stall.customization import Customization
from stall.data import Catalog
from stall.errors import (
    ConfigurationUnavailable,
    OrderPersistenceFailure,
    PaymentAbandoned,
    PaymentDeclined,
    StallError,
    StoreError,
)
from stall.events import OrderChanged, PaymentDismissed, PaymentFailed, PaymentSucceeded
from stall.lifecycle import OrderStatus
from stall.models import CartLineItem, Order, OrderDraft
from stall.payment import CheckoutRequest, PaymentGateway
from stall.persistence import OrderStore, Unsubscribe
from stall.pricing import to_minor_units

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    BROWSING = "browsing"
    CUSTOMIZING = "customizing"
    CART_REVIEW = "cart_review"
    PAYING = "paying"
    TRACKING = "tracking"


@dataclass
class CustomerState:
    phase: Phase = Phase.BROWSING
    customization: Customization | None = None
    last_order_id: str | None = None
    current_order: Order | None = None
    current_status: OrderStatus | None = None
    error: StallError | None = None


def pick_order_number(
    taken: set[int],
    rng: random.Random,
    low: int = ORDER_NUMBER_MIN,
    high: int = ORDER_NUMBER_MAX,
) -> int:
    """Pick a display number not held by any uncollected order."""
    free = [n for n in range(low, high + 1) if n not in taken]
    if not free:
        logger.warning("order_number_pool_exhausted low=%d high=%d active=%d", low, high, len(taken))
        return rng.randint(low, high)
    return rng.choice(free)


class CustomerOrderingFlow:
    """State for one customer session.

    Payment outcomes and order updates arrive through :meth:`handle`, which is
    handed to the adapters as their completion/subscription callback.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: OrderStore | None,
        gateway: PaymentGateway | None,
        customer_id: str,
        currency: str = CURRENCY,
        business_name: str = BUSINESS_NAME,
        description: str = PAYMENT_DESCRIPTION,
        pickup_address: str = PICKUP_ADDRESS,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.gateway = gateway
        self.customer_id = customer_id
        self.currency = currency
        self.business_name = business_name
        self.description = description
        self.pickup_address = pickup_address
        self.cart = Cart(catalog)
        self.state = CustomerState()
        self._rng = rng or random.Random()
        self._return_phase = Phase.BROWSING
        self._unsubscribe_order: Unsubscribe | None = None
        self._listeners: list[Callable[[CustomerState], None]] = []

    # Listeners

    def add_listener(self, listener: Callable[[CustomerState], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    # Derived state

    @property
    def adapters_ready(self) -> bool:
        return self.store is not None and self.gateway is not None

    @property
    def is_placing_order(self) -> bool:
        return self.state.phase == Phase.PAYING

    @property
    def awaiting_staff(self) -> bool:
        """A paid order failed to save; checkout stays closed until staff sort it out."""
        return isinstance(self.state.error, OrderPersistenceFailure)

    @property
    def checkout_enabled(self) -> bool:
        return (
            self.state.phase in (Phase.BROWSING, Phase.CART_REVIEW)
            and not self.cart.is_empty
            and self.cart.total() > 0
            and self.adapters_ready
            and not self.awaiting_staff
        )

    def _cart_locked(self) -> bool:
        return self.state.phase in (Phase.PAYING, Phase.TRACKING)

    # Browsing and customization

    def select_item(self, item_id: str) -> CartLineItem | None:
        """Add a plain item straight to the cart, or open customization for it."""
        if self._cart_locked() or self.state.phase == Phase.CUSTOMIZING:
            return None
        item = self.catalog.menu_item(item_id)
        if item is None:
            logger.warning("select_unknown_item item=%s", item_id)
            return None

        if item.customizable:
            self._return_phase = self.state.phase
            self.state.customization = Customization.start(item, self.catalog)
            self.state.phase = Phase.CUSTOMIZING
            self._emit()
            return None

        line = self.cart.add_item(item)
        self._emit()
        return line

    def finish_customization(self) -> CartLineItem | None:
        customization = self.state.customization
        if customization is None:
            return None
        line = self.cart.add_item(
            customization.item,
            quantity=customization.quantity,
            selections=customization.selection(),
            notes=customization.notes,
        )
        self.state.customization = None
        self.state.phase = self._return_phase
        self._emit()
        return line

    def cancel_customization(self) -> None:
        if self.state.customization is None:
            return
        self.state.customization = None
        self.state.phase = self._return_phase
        self._emit()

    def review_cart(self) -> None:
        if self.state.phase == Phase.BROWSING:
            self.state.phase = Phase.CART_REVIEW
            self._emit()

    def back_to_menu(self) -> None:
        if self.state.phase == Phase.CART_REVIEW:
            self.state.phase = Phase.BROWSING
            self._emit()

    # Cart edits

    def remove_item(self, instance_id: str) -> None:
        if self._cart_locked():
            return
        self.cart.remove_item(instance_id)
        self._emit()

    def change_quantity(self, instance_id: str, delta: int) -> None:
        if self._cart_locked():
            return
        self.cart.change_quantity(instance_id, delta)
        self._emit()

    # Payment

    def place_order(self) -> bool:
        """Open the checkout for the cart total. Returns False when checkout is not allowed."""
        if self.state.phase not in (Phase.BROWSING, Phase.CART_REVIEW) or self.awaiting_staff:
            return False
        if self.cart.is_empty or self.cart.total() <= 0:
            logger.info("checkout_rejected reason=empty_cart")
            return False
        if self.store is None or self.gateway is None:
            error = ConfigurationUnavailable("Error: Payment gateway is not loaded. Please restart the app.")
            logger.error("checkout_rejected reason=configuration_unavailable store=%s gateway=%s", self.store, self.gateway)
            self.state.error = error
            self._emit()
            return False

        total = self.cart.total()
        request = CheckoutRequest(
            amount_minor_units=to_minor_units(total),
            currency_code=self.currency,
            description=self.description,
            business_name=self.business_name,
            notes={"address": self.pickup_address},
        )
        self.state.phase = Phase.PAYING
        self.state.error = None
        self._emit()
        logger.info("checkout_opened amount=%d currency=%s lines=%d", request.amount_minor_units, self.currency, len(self.cart))
        try:
            self.gateway.open_checkout(request, self.handle)
        except Exception:
            logger.exception("checkout_open_failed amount=%d", request.amount_minor_units)
            self.state.phase = Phase.CART_REVIEW
            self.state.error = ConfigurationUnavailable("Error: Could not open the payment window. Please try again.")
            self._emit()
            return False
        return True

    def handle(self, event) -> None:
        """Apply one adapter event to the flow state."""
        if isinstance(event, PaymentSucceeded):
            self._on_payment_succeeded(event)
        elif isinstance(event, PaymentFailed):
            self._on_payment_failed(PaymentDeclined(event.reason))
        elif isinstance(event, PaymentDismissed):
            self._on_payment_failed(PaymentAbandoned())
        elif isinstance(event, OrderChanged):
            self._on_order_changed(event)
        else:
            raise TypeError(f"Unexpected event {event!r}")

    def _on_payment_succeeded(self, event: PaymentSucceeded) -> None:
        if self.state.phase != Phase.PAYING:
            logger.warning("payment_outcome_ignored outcome=success phase=%s", self.state.phase.value)
            return
        assert self.store is not None

        if not event.payment_ref:
            logger.error("order_persistence_failed payment_ref=<missing> error=payment succeeded without a reference")
            self.state.phase = Phase.CART_REVIEW
            self.state.error = OrderPersistenceFailure(event.payment_ref)
            self._emit()
            return

        try:
            order_number = pick_order_number(self.store.active_order_numbers(), self._rng)
            draft = OrderDraft(
                order_number=order_number,
                customer_id=self.customer_id,
                lines=self.cart.snapshot(),
                total=self.cart.total(),
                payment_ref=event.payment_ref,
            )
            order_id = self.store.create_order(draft)
        except StoreError as exc:
            logger.error("order_persistence_failed payment_ref=%s error=%s", event.payment_ref, exc)
            self.state.phase = Phase.CART_REVIEW
            self.state.error = OrderPersistenceFailure(event.payment_ref)
            self._emit()
            return

        self.state.last_order_id = order_id
        self.cart.clear()
        self.state.phase = Phase.TRACKING
        self.state.current_status = OrderStatus.NEW
        self.state.current_order = None
        self.state.error = None
        self._emit()
        self._unsubscribe_order = self.store.subscribe_order(order_id, self.handle)

    def _on_payment_failed(self, error: PaymentDeclined | PaymentAbandoned) -> None:
        if self.state.phase != Phase.PAYING:
            logger.warning("payment_outcome_ignored outcome=%s phase=%s", type(error).__name__, self.state.phase.value)
            return
        logger.warning("payment_not_completed kind=%s detail=%s", type(error).__name__, error)
        self.state.phase = Phase.CART_REVIEW
        self.state.error = error
        self._emit()

    # Tracking

    def _on_order_changed(self, event: OrderChanged) -> None:
        if event.order_id != self.state.last_order_id:
            return
        if event.order is None:
            logger.warning("tracked_order_missing id=%s", event.order_id)
            return
        self.state.current_order = event.order
        self.state.current_status = event.order.status
        self._emit()

    def start_new_order(self) -> None:
        if self.state.phase != Phase.TRACKING:
            return
        self._stop_tracking()
        self.state.last_order_id = None
        self.state.current_order = None
        self.state.current_status = None
        self.state.phase = Phase.BROWSING
        self._emit()

    def dismiss_error(self) -> None:
        if self.awaiting_staff:
            return
        if self.state.error is not None:
            self.state.error = None
            self._emit()

    def close(self) -> None:
        self._stop_tracking()
        self._listeners.clear()

    def _stop_tracking(self) -> None:
        if self._unsubscribe_order is not None:
            self._unsubscribe_order()
            self._unsubscribe_order = None
