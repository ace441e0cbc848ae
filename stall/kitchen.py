"""Staff kitchen display: live order queue and status advancement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from stall.errors import StallError, StatusUpdateFailure, StoreError
from stall.events import OrdersChanged
from stall.lifecycle import OrderStatus, action_label, next_status
from stall.models import Order
from stall.persistence import OrderStore, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaffAction:
    """The single forward action offered for an order."""

    label: str
    enabled: bool
    target: OrderStatus | None


@dataclass
class KitchenState:
    orders: tuple[Order, ...] = ()
    loading: bool = True
    last_error: StallError | None = None


def action_for(order: Order) -> StaffAction:
    target = next_status(order.status)
    return StaffAction(label=action_label(order.status), enabled=target is not None, target=target)


def is_highlighted(order: Order) -> bool:
    return order.status == OrderStatus.NEW


class KitchenDisplayFlow:
    """Mirror of the store's order collection plus the staff advance action.

    The local list only changes when the store delivers a new snapshot, so a
    failed write never shows a status the store does not have.
    """

    def __init__(self, store: OrderStore) -> None:
        self.store = store
        self.state = KitchenState()
        self._unsubscribe: Unsubscribe | None = None
        self._listeners: list[Callable[[KitchenState], None]] = []

    def add_listener(self, listener: Callable[[KitchenState], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self.state.loading = True
        self._unsubscribe = self.store.subscribe_all_orders(self.handle)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle(self, event) -> None:
        if not isinstance(event, OrdersChanged):
            raise TypeError(f"Unexpected event {event!r}")
        self.state.orders = event.orders
        self.state.loading = False
        self._emit()

    def order(self, order_id: str) -> Order | None:
        for order in self.state.orders:
            if order.order_id == order_id:
                return order
        return None

    def advance(self, order_id: str) -> bool:
        """Write the next status for ``order_id``. Returns False when nothing was written."""
        order = self.order(order_id)
        if order is None:
            logger.warning("advance_unknown_order id=%s", order_id)
            return False
        target = next_status(order.status)
        if target is None:
            return False

        try:
            self.store.update_status(order_id, target)
        except StoreError as exc:
            logger.error("status_update_failed id=%s target=%s error=%s", order_id, target.name, exc)
            self.state.last_error = StatusUpdateFailure(order_id)
            self._emit()
            return False

        logger.info("order_advanced id=%s number=%d %s->%s", order_id, order.order_number, order.status.name, target.name)
        self.state.last_error = None
        return True
