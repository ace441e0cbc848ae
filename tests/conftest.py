from __future__ import annotations

import random

import pytest

from stall.data import DEFAULT_CATALOG
from stall.errors import StoreError
from stall.events import PaymentDismissed, PaymentFailed, PaymentSucceeded
from stall.ordering import CustomerOrderingFlow
from stall.persistence import SqliteOrderStore


class FakeGateway:
    """Records checkout requests; tests resolve them by hand."""

    def __init__(self) -> None:
        self.requests = []
        self._callbacks = []

    def open_checkout(self, request, on_complete) -> None:
        self.requests.append(request)
        self._callbacks.append(on_complete)

    def succeed(self, payment_ref: str = "pay_test123") -> None:
        self._callbacks[-1](PaymentSucceeded(payment_ref=payment_ref))

    def fail(self, reason: str = "card declined") -> None:
        self._callbacks[-1](PaymentFailed(reason=reason))

    def dismiss(self) -> None:
        self._callbacks[-1](PaymentDismissed())


class FailingCreateStore(SqliteOrderStore):
    def __init__(self, db_path) -> None:
        super().__init__(db_path)
        self.create_calls = 0

    def create_order(self, draft):
        self.create_calls += 1
        raise StoreError("disk I/O error")


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def store(tmp_path):
    order_store = SqliteOrderStore(tmp_path / "orders.db")
    order_store.bootstrap_schema()
    yield order_store
    order_store.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def flow(catalog, store, gateway):
    customer_flow = CustomerOrderingFlow(catalog, store, gateway, customer_id="customer-1", rng=random.Random(7))
    yield customer_flow
    customer_flow.close()
