from stall.errors import StatusUpdateFailure, StoreError
from stall.kitchen import KitchenDisplayFlow, action_for, is_highlighted
from stall.lifecycle import OrderStatus
from stall.models import OrderDraft, OrderLine
from stall.persistence import SqliteOrderStore


def _place(store, number):
    return store.create_order(
        OrderDraft(
            order_number=number,
            customer_id="customer-1",
            lines=(OrderLine(name="Bhel Puri", quantity=1, price=30),),
            total=30,
            payment_ref=f"pay_{number}",
        )
    )


class BrokenUpdateStore(SqliteOrderStore):
    def update_status(self, order_id, status):
        raise StoreError("network down")


def test_kitchen_sees_orders_newest_first(store):
    first = _place(store, 101)
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()
    assert kitchen.state.loading is False

    second = _place(store, 102)

    assert [o.order_id for o in kitchen.state.orders] == [second, first]
    kitchen.stop()


def test_advance_walks_the_lifecycle(store):
    order_id = _place(store, 101)
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()

    statuses = []
    for _ in range(3):
        assert kitchen.advance(order_id) is True
        statuses.append(kitchen.order(order_id).status)

    assert statuses == [OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COLLECTED]
    assert kitchen.advance(order_id) is False
    assert store.get_order(order_id).status is OrderStatus.COLLECTED
    kitchen.stop()


def test_ready_order_becomes_collected_and_action_disabled(store):
    order_id = _place(store, 101)
    store.update_status(order_id, OrderStatus.READY)
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()

    action = action_for(kitchen.order(order_id))
    assert action.label == "Mark Collected"
    assert action.enabled and action.target is OrderStatus.COLLECTED

    kitchen.advance(order_id)

    order = kitchen.order(order_id)
    assert order.status is OrderStatus.COLLECTED
    action = action_for(order)
    assert action.enabled is False
    assert action.target is None
    assert action.label == "Collected"
    kitchen.stop()


def test_failed_update_does_not_change_local_status(tmp_path):
    store = BrokenUpdateStore(tmp_path / "orders.db")
    store.bootstrap_schema()
    order_id = _place(store, 101)
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()

    assert kitchen.advance(order_id) is False

    assert kitchen.order(order_id).status is OrderStatus.NEW
    assert isinstance(kitchen.state.last_error, StatusUpdateFailure)
    assert kitchen.state.last_error.order_id == order_id
    kitchen.stop()
    store.close()


def test_subscriber_error_after_update_is_not_a_failed_update(store):
    order_id = _place(store, 101)
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()
    calls = []

    def flaky_listener(event):
        calls.append(event)
        if len(calls) > 1:
            raise RuntimeError("listener bug")

    store.subscribe_all_orders(flaky_listener)

    assert kitchen.advance(order_id) is True

    assert kitchen.state.last_error is None
    assert kitchen.order(order_id).status is OrderStatus.PREPARING
    assert store.get_order(order_id).status is OrderStatus.PREPARING
    kitchen.stop()


def test_two_kitchens_on_one_store_both_update(store):
    order_id = _place(store, 101)
    first = KitchenDisplayFlow(store)
    second = KitchenDisplayFlow(store)
    first.start()
    second.start()

    first.advance(order_id)

    assert second.order(order_id).status is OrderStatus.PREPARING
    first.stop()
    second.stop()


def test_stopped_kitchen_gets_no_updates(store):
    kitchen = KitchenDisplayFlow(store)
    kitchen.start()
    kitchen.stop()

    _place(store, 101)

    assert kitchen.state.orders == ()
    assert kitchen.active is False


def test_new_orders_are_highlighted(store):
    order_id = _place(store, 101)
    assert is_highlighted(store.get_order(order_id))

    store.update_status(order_id, OrderStatus.PREPARING)
    assert not is_highlighted(store.get_order(order_id))
