import sqlite3

import pytest

from stall.errors import StoreError
from stall.lifecycle import OrderStatus
from stall.models import OrderDraft, OrderLine
from stall.persistence import SqliteOrderStore


def _draft(number=101, payment_ref="pay_1"):
    return OrderDraft(
        order_number=number,
        customer_id="customer-1",
        lines=(
            OrderLine(name="Frankie", quantity=2, price=80, customizations=("onion", "paneer")),
            OrderLine(name="Bhel Puri", quantity=1, price=30, notes="less spicy"),
            OrderLine(name="Mix Chips (Large)", quantity=1, price=40, customizations=()),
        ),
        total=230,
        payment_ref=payment_ref,
    )


def test_draft_requires_payment_reference():
    with pytest.raises(ValueError):
        _draft(payment_ref="")


def test_create_and_read_back(store):
    order_id = store.create_order(_draft())
    order = store.get_order(order_id)

    assert order.order_number == 101
    assert order.status is OrderStatus.NEW
    assert order.total == 230
    assert order.payment_ref == "pay_1"
    assert order.created_at is not None
    assert order.lines[0].customizations == ("onion", "paneer")
    assert order.lines[1].customizations is None
    assert order.lines[1].notes == "less spicy"
    assert order.lines[2].customizations == ()


def test_orders_listed_newest_first(store):
    first = store.create_order(_draft(101))
    second = store.create_order(_draft(102))
    third = store.create_order(_draft(103))

    assert [o.order_id for o in store.list_orders()] == [third, second, first]


def test_subscribe_all_delivers_full_set_on_each_change(store):
    deliveries = []
    unsubscribe = store.subscribe_all_orders(lambda event: deliveries.append(event.orders))

    first = store.create_order(_draft(101))
    store.update_status(first, OrderStatus.PREPARING)
    second = store.create_order(_draft(102))

    assert [len(orders) for orders in deliveries] == [0, 1, 1, 2]
    assert deliveries[2][0].status is OrderStatus.PREPARING
    assert [o.order_id for o in deliveries[3]] == [second, first]

    unsubscribe()
    unsubscribe()
    store.create_order(_draft(103))
    assert len(deliveries) == 4


def test_subscribe_order_tracks_one_order(store):
    order_id = store.create_order(_draft())
    other_id = store.create_order(_draft(102))
    statuses = []
    unsubscribe = store.subscribe_order(order_id, lambda event: statuses.append(event.order.status))

    store.update_status(order_id, OrderStatus.PREPARING)
    store.update_status(other_id, OrderStatus.PREPARING)
    unsubscribe()
    store.update_status(order_id, OrderStatus.READY)

    assert statuses == [OrderStatus.NEW, OrderStatus.PREPARING, OrderStatus.PREPARING]


def test_update_unknown_order_raises(store):
    with pytest.raises(StoreError):
        store.update_status("missing", OrderStatus.READY)


def test_active_order_numbers_exclude_collected(store):
    first = store.create_order(_draft(101))
    store.create_order(_draft(102))
    store.update_status(first, OrderStatus.COLLECTED)

    assert store.active_order_numbers() == {102}


def test_poll_picks_up_writes_from_another_connection(tmp_path):
    db_path = tmp_path / "shared.db"
    kitchen = SqliteOrderStore(db_path)
    kitchen.bootstrap_schema()
    customer = SqliteOrderStore(db_path)

    deliveries = []
    kitchen.subscribe_all_orders(lambda event: deliveries.append(event.orders))
    kitchen.poll()
    deliveries.clear()

    assert kitchen.poll() is False
    customer.create_order(_draft())
    assert kitchen.poll() is True
    assert len(deliveries) == 1
    assert len(deliveries[0]) == 1
    assert kitchen.poll() is False

    kitchen.close()
    customer.close()


def test_bootstrap_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    store = SqliteOrderStore(blocker / "orders.db")

    with pytest.raises(StoreError):
        store.bootstrap_schema()


def test_schema_has_expected_tables(store):
    conn = sqlite3.connect(store.db_path)
    try:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert {"orders", "order_items", "order_item_customizations"} <= names
