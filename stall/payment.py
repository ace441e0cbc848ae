"""Payment gateway adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol

from stall.events import PaymentOutcome


@dataclass(frozen=True)
class CheckoutRequest:
    """What the checkout widget is opened with."""

    amount_minor_units: int
    currency_code: str
    description: str
    business_name: str
    notes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount_minor_units <= 0:
            raise ValueError("Checkout amount must be positive")


class PaymentGateway(Protocol):
    """Opens an external checkout and reports back exactly once.

    ``open_checkout`` returns immediately; ``on_complete`` later receives a
    :class:`~stall.events.PaymentSucceeded`, :class:`~stall.events.PaymentFailed`
    or :class:`~stall.events.PaymentDismissed`.
    """

    def open_checkout(self, request: CheckoutRequest, on_complete: Callable[[PaymentOutcome], None]) -> None: ...
