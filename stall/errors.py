"""Error kinds raised or recorded by the ordering flows."""

from __future__ import annotations


class StallError(Exception):
    """Base class for stall-order errors."""

    user_visible = False


class ConfigurationUnavailable(StallError):
    """Order store or payment gateway could not be set up."""


class StoreError(StallError):
    """The order store rejected a read or write."""


class PaymentDeclined(StallError):
    """The gateway reported a failed payment. The cart is kept."""

    user_visible = True

    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment failed. Reason: {reason or 'Unknown'}. Please try again.")
        self.reason = reason


class PaymentAbandoned(StallError):
    """The customer closed the checkout without paying."""

    user_visible = True

    def __init__(self) -> None:
        super().__init__("Payment cancelled.")


class OrderPersistenceFailure(StallError):
    """Payment succeeded but the order could not be recorded.

    Never retried automatically; staff have to settle it by hand.
    """

    user_visible = True

    def __init__(self, payment_ref: str) -> None:
        super().__init__(
            "Payment was successful, but there was an error saving your order. "
            f"Please contact staff immediately (payment reference {payment_ref or 'unavailable'})."
        )
        self.payment_ref = payment_ref


class StatusUpdateFailure(StallError):
    """A staff status change did not reach the store."""

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Could not update status for order {order_id}")
        self.order_id = order_id
