"""Order store adapter and its SQLite implementation."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Protocol
from uuid import uuid4

from stall.errors import StoreError
from stall.events import OrderChanged, OrdersChanged
from stall.lifecycle import OrderStatus, parse_status
from stall.models import Order, OrderDraft, OrderLine

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class OrderStore(Protocol):
    """Shared order collection used by customer and staff sessions.

    Subscriptions deliver the current state right away and again after every
    mutation. ``subscribe_all_orders`` always delivers the full set, newest
    first.
    """

    def create_order(self, draft: OrderDraft) -> str: ...

    def subscribe_order(self, order_id: str, on_change: Callable[[OrderChanged], None]) -> Unsubscribe: ...

    def subscribe_all_orders(self, on_change: Callable[[OrdersChanged], None]) -> Unsubscribe: ...

    def update_status(self, order_id: str, status: OrderStatus) -> None: ...

    def active_order_numbers(self) -> set[int]: ...

    def poll(self) -> bool: ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


class SqliteOrderStore:
    """SQLite-backed order store.

    Several processes may open the same file. Writes made here are published
    to local subscribers immediately; writes from other connections are picked
    up by :meth:`poll`.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._order_listeners: dict[str, list[Callable[[OrderChanged], None]]] = {}
        self._all_listeners: list[Callable[[OrdersChanged], None]] = []
        self._watch_conn: sqlite3.Connection | None = None
        self._seen_version: int | None = None

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        try:
            with closing(self._connect()) as conn:
                conn.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS orders (
                        id TEXT PRIMARY KEY,
                        order_number INTEGER NOT NULL,
                        customer_id TEXT NOT NULL,
                        total INTEGER NOT NULL,
                        status TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        payment_ref TEXT NOT NULL
                    );

                    CREATE TABLE IF NOT EXISTS order_items (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        order_id TEXT NOT NULL,
                        line_index INTEGER NOT NULL,
                        name TEXT NOT NULL,
                        quantity INTEGER NOT NULL,
                        price INTEGER NOT NULL,
                        customized INTEGER NOT NULL DEFAULT 0,
                        notes TEXT,
                        FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
                    );

                    CREATE TABLE IF NOT EXISTS order_item_customizations (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        order_item_id INTEGER NOT NULL,
                        ingredient_id TEXT NOT NULL,
                        FOREIGN KEY(order_item_id) REFERENCES order_items(id) ON DELETE CASCADE
                    );

                    CREATE INDEX IF NOT EXISTS idx_orders_created_at
                        ON orders(created_at);

                    CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                        ON order_items(order_id, line_index);

                    CREATE INDEX IF NOT EXISTS idx_order_item_customizations_item_id
                        ON order_item_customizations(order_item_id);
                    """
                )
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(f"Cannot open order store at {self.db_path}: {exc}") from exc

    def create_order(self, draft: OrderDraft) -> str:
        """Persist a paid order and return its store-assigned id."""
        order_id = uuid4().hex
        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO orders (id, order_number, customer_id, total, status, created_at, payment_ref)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            order_id,
                            draft.order_number,
                            draft.customer_id,
                            draft.total,
                            OrderStatus.NEW.value,
                            _utc_now_iso(),
                            draft.payment_ref,
                        ),
                    )
                    for idx, line in enumerate(draft.lines):
                        cur = conn.execute(
                            """
                            INSERT INTO order_items (order_id, line_index, name, quantity, price, customized, notes)
                            VALUES (?, ?, ?, ?, ?, ?, ?)
                            """,
                            (
                                order_id,
                                idx,
                                line.name,
                                line.quantity,
                                line.price,
                                int(line.customizations is not None),
                                line.notes,
                            ),
                        )
                        order_item_id = int(cur.lastrowid)
                        for ingredient_id in line.customizations or ():
                            conn.execute(
                                "INSERT INTO order_item_customizations (order_item_id, ingredient_id) VALUES (?, ?)",
                                (order_item_id, ingredient_id),
                            )
        except sqlite3.Error as exc:
            raise StoreError(f"Could not save order: {exc}") from exc

        logger.info("order_created id=%s number=%d total=%d", order_id, draft.order_number, draft.total)
        self._publish_after_write()
        return order_id

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Overwrite the status field. Last write wins."""
        try:
            with closing(self._connect()) as conn:
                with conn:
                    cur = conn.execute("UPDATE orders SET status = ? WHERE id = ?", (status.value, order_id))
        except sqlite3.Error as exc:
            raise StoreError(f"Could not update order {order_id}: {exc}") from exc
        if cur.rowcount == 0:
            raise StoreError(f"No order with id {order_id}")

        logger.info("order_status id=%s status=%s", order_id, status.name)
        self._publish_after_write()

    def get_order(self, order_id: str) -> Order | None:
        orders = self._load_orders("WHERE id = ?", (order_id,))
        return orders[0] if orders else None

    def list_orders(self) -> tuple[Order, ...]:
        return self._load_orders()

    def active_order_numbers(self) -> set[int]:
        """Display numbers held by orders that have not been collected yet."""
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(
                    "SELECT order_number FROM orders WHERE status != ?",
                    (OrderStatus.COLLECTED.value,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not read order numbers: {exc}") from exc
        return {int(row[0]) for row in rows}

    def subscribe_order(self, order_id: str, on_change: Callable[[OrderChanged], None]) -> Unsubscribe:
        self._order_listeners.setdefault(order_id, []).append(on_change)
        on_change(OrderChanged(order_id=order_id, order=self.get_order(order_id)))

        def unsubscribe() -> None:
            listeners = self._order_listeners.get(order_id, [])
            if on_change in listeners:
                listeners.remove(on_change)
            if not listeners:
                self._order_listeners.pop(order_id, None)

        return unsubscribe

    def subscribe_all_orders(self, on_change: Callable[[OrdersChanged], None]) -> Unsubscribe:
        self._all_listeners.append(on_change)
        on_change(OrdersChanged(orders=self.list_orders()))

        def unsubscribe() -> None:
            if on_change in self._all_listeners:
                self._all_listeners.remove(on_change)

        return unsubscribe

    def poll(self) -> bool:
        """Publish to subscribers if another connection changed the database."""
        try:
            version = self._data_version()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not poll order store: {exc}") from exc
        if version == self._seen_version:
            return False
        self._publish()
        return True

    def close(self) -> None:
        if self._watch_conn is not None:
            self._watch_conn.close()
            self._watch_conn = None
            self._seen_version = None

    def _data_version(self) -> int:
        if self._watch_conn is None:
            self._watch_conn = self._connect()
        return int(self._watch_conn.execute("PRAGMA data_version").fetchone()[0])

    def _publish_after_write(self) -> None:
        # The row is already committed; a failing reader or subscriber must not
        # turn the write into an error for the caller.
        try:
            self._publish()
        except Exception:
            logger.exception("publish_after_write_failed; next poll will republish")
            self._seen_version = None

    def _publish(self) -> None:
        try:
            self._seen_version = self._data_version()
        except sqlite3.Error:
            logger.warning("data_version unavailable; next poll will republish", exc_info=True)
            self._seen_version = None

        if self._all_listeners:
            event = OrdersChanged(orders=self.list_orders())
            for listener in list(self._all_listeners):
                listener(event)

        for order_id, listeners in list(self._order_listeners.items()):
            if not listeners:
                continue
            event = OrderChanged(order_id=order_id, order=self.get_order(order_id))
            for listener in list(listeners):
                listener(event)

    def _load_orders(self, where: str = "", params: tuple = ()) -> tuple[Order, ...]:
        try:
            with closing(self._connect()) as conn:
                order_rows = conn.execute(
                    f"""
                    SELECT id, order_number, customer_id, total, status, created_at, payment_ref
                    FROM orders {where}
                    ORDER BY created_at DESC, rowid DESC
                    """,
                    params,
                ).fetchall()
                if not order_rows:
                    return ()

                order_ids = [row[0] for row in order_rows]
                placeholders = ", ".join("?" for _ in order_ids)
                item_rows = conn.execute(
                    f"""
                    SELECT id, order_id, name, quantity, price, customized, notes
                    FROM order_items
                    WHERE order_id IN ({placeholders})
                    ORDER BY order_id, line_index
                    """,
                    order_ids,
                ).fetchall()
                item_ids = [row[0] for row in item_rows]
                custom_rows = []
                if item_ids:
                    item_placeholders = ", ".join("?" for _ in item_ids)
                    custom_rows = conn.execute(
                        f"""
                        SELECT order_item_id, ingredient_id
                        FROM order_item_customizations
                        WHERE order_item_id IN ({item_placeholders})
                        ORDER BY id
                        """,
                        item_ids,
                    ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not read orders: {exc}") from exc

        customizations: dict[int, list[str]] = {}
        for order_item_id, ingredient_id in custom_rows:
            customizations.setdefault(order_item_id, []).append(ingredient_id)

        lines_by_order: dict[str, list[OrderLine]] = {}
        for item_id, order_id, name, quantity, price, customized, notes in item_rows:
            lines_by_order.setdefault(order_id, []).append(
                OrderLine(
                    name=name,
                    quantity=int(quantity),
                    price=int(price),
                    customizations=tuple(customizations.get(item_id, [])) if customized else None,
                    notes=notes,
                )
            )

        return tuple(
            Order(
                order_id=order_id,
                order_number=int(order_number),
                customer_id=customer_id,
                lines=tuple(lines_by_order.get(order_id, [])),
                total=int(total),
                status=parse_status(status),
                created_at=_parse_timestamp(created_at),
                payment_ref=payment_ref,
            )
            for order_id, order_number, customer_id, total, status, created_at, payment_ref in order_rows
        )
