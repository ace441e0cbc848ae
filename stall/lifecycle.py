"""Order lifecycle: NEW -> PREPARING -> READY -> COLLECTED."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OrderStatus(str, Enum):
    NEW = "New Order"
    PREPARING = "Preparing"
    READY = "Ready for Collection"
    COLLECTED = "Collected"


@dataclass(frozen=True)
class LifecycleStep:
    """What each party sees for one status, and where staff can move it next."""

    next_status: OrderStatus | None
    customer_message: str
    action_label: str


LIFECYCLE: dict[OrderStatus, LifecycleStep] = {
    OrderStatus.NEW: LifecycleStep(
        next_status=OrderStatus.PREPARING,
        customer_message="Payment Received! Order is in the queue.",
        action_label="Start Preparing",
    ),
    OrderStatus.PREPARING: LifecycleStep(
        next_status=OrderStatus.READY,
        customer_message="The chef is preparing your delicious meal!",
        action_label="Ready for Pickup!",
    ),
    OrderStatus.READY: LifecycleStep(
        next_status=OrderStatus.COLLECTED,
        customer_message="Your order is ready! Please collect it from the stall.",
        action_label="Mark Collected",
    ),
    OrderStatus.COLLECTED: LifecycleStep(
        next_status=None,
        customer_message="Thank you! Enjoy your food!",
        action_label="Collected",
    ),
}

PENDING_MESSAGE = "Checking Status..."


def next_status(current: OrderStatus) -> OrderStatus | None:
    """Return the status after ``current``, or None once collected."""
    return LIFECYCLE[current].next_status


def is_terminal(status: OrderStatus) -> bool:
    """True once no further staff action exists for ``status``."""
    return next_status(status) is None


def customer_message(status: OrderStatus | None) -> str:
    """Text shown to the customer; ``None`` means the order has not been read yet."""
    if status is None:
        return PENDING_MESSAGE
    return LIFECYCLE[status].customer_message


def action_label(status: OrderStatus) -> str:
    """Label for the single staff button on an order in ``status``."""
    return LIFECYCLE[status].action_label


def parse_status(value: str) -> OrderStatus:
    """Accept either the enum name (``"READY"``) or the stored display value."""
    try:
        return OrderStatus(value)
    except ValueError:
        pass
    try:
        return OrderStatus[value]
    except KeyError:
        raise ValueError(f"Unknown order status {value!r}") from None
