"""Events delivered by the store and payment adapters to the flows."""

from __future__ import annotations

from dataclasses import dataclass

from stall.models import Order


@dataclass(frozen=True)
class PaymentSucceeded:
    payment_ref: str


@dataclass(frozen=True)
class PaymentFailed:
    reason: str


@dataclass(frozen=True)
class PaymentDismissed:
    pass


@dataclass(frozen=True)
class OrderChanged:
    """Latest state of a single subscribed order; ``order`` is None if it vanished."""

    order_id: str
    order: Order | None


@dataclass(frozen=True)
class OrdersChanged:
    """Full order set, newest first."""

    orders: tuple[Order, ...]


PaymentOutcome = PaymentSucceeded | PaymentFailed | PaymentDismissed
