"""
Pytest fixtures for MC Store tests.

FakeBackend emulates the subset of the PostgREST grammar the repos use:
eq/ilike filters, select, order, limit, on_conflict with
Prefer: resolution=ignore-duplicates, return=representation and the
add_to_cart RPC.
"""
import itertools
import os
import threading
import time
from typing import Any, Dict, List
from urllib.parse import unquote

import pytest

# Set test environment before importing app modules
os.environ["SESSION_DATABASE_URL"] = "sqlite://"
os.environ["CART_UPSERT_STRATEGY"] = "rpc"

from mcstore.domain.errors import RemoteError
from mcstore.services.cart_service import CartService
from mcstore.services.rest_gateway import BackendConfig, RestGateway
from mcstore.services.stock_service import StockService

_RESERVED = {"select", "order", "limit", "on_conflict"}


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FakeBackend(RestGateway):
    """In-memory tables behind the RestGateway interface."""

    def __init__(self):
        super().__init__(BackendConfig(base_url="http://backend.test", api_key="test-key"))
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.failures: Dict[tuple, int] = {}
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self.delay = 0.0

    # --- test helpers ---
    def seed(self, table: str, *rows: Dict[str, Any]) -> None:
        for row in rows:
            self._insert(table, dict(row))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def fail(self, method: str, table: str, times: int = 10**6) -> None:
        self.failures[(method, table)] = times

    # --- emulation ---
    def _insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        row.setdefault("id", next(self._ids))
        row.setdefault("added_at", next(self._clock))
        row.setdefault("created_at", next(self._clock))
        self.rows(table).append(row)
        return row

    @staticmethod
    def _parse(path: str):
        table, _, query = path.partition("?")
        params, filters = {}, []
        for part in filter(None, query.split("&")):
            key, _, value = part.partition("=")
            if key in _RESERVED:
                params[key] = value
            else:
                op, _, arg = value.partition(".")
                filters.append((key, op, unquote(arg)))
        return table, params, filters

    @staticmethod
    def _matches(row, filters) -> bool:
        for field, op, arg in filters:
            value = _as_text(row.get(field))
            if op == "eq" and value != arg:
                return False
            if op == "ilike" and arg.strip("%").lower() not in value.lower():
                return False
        return True

    def _maybe_fail(self, method: str, table: str) -> None:
        left = self.failures.get((method, table), 0)
        if left:
            self.failures[(method, table)] = left - 1
            raise RemoteError(500, f"{method} {table} failed")

    def request(self, path, method="GET", body=None, headers=None):
        self.calls.append((method, path, body, headers))
        if self.delay:
            time.sleep(self.delay)
        table, params, filters = self._parse(path)
        self._maybe_fail(method, table)
        prefer = (headers or {}).get("Prefer", "")

        if table.startswith("rpc/"):
            return self._rpc(table[4:], body)

        rows = self.rows(table)
        matched = [r for r in rows if self._matches(r, filters)]

        if method == "GET":
            order = params.get("order")
            if order:
                field, _, direction = order.partition(".")
                matched.sort(key=lambda r: _as_text(r.get(field)).zfill(20), reverse=direction == "desc")
            if params.get("limit"):
                matched = matched[: int(params["limit"])]
            select = params.get("select", "*")
            if select != "*":
                fields = select.split(",")
                return [{f: r.get(f) for f in fields} for r in matched]
            return [dict(r) for r in matched]

        if method == "POST":
            payload = body if isinstance(body, list) else [body]
            created = []
            conflict = params.get("on_conflict")
            for item in payload:
                if conflict and "ignore-duplicates" in prefer:
                    keys = conflict.split(",")
                    if any(all(_as_text(r.get(k)) == _as_text(item.get(k)) for k in keys) for r in rows):
                        continue
                created.append(dict(self._insert(table, dict(item))))
            return created if "return=representation" in prefer else None

        if method == "PATCH":
            for r in matched:
                r.update(body)
            return None

        if method == "DELETE":
            self.tables[table] = [r for r in rows if r not in matched]
            return None

        raise AssertionError(f"unexpected method {method}")

    def _rpc(self, function: str, params: Dict[str, Any]):
        assert function == "add_to_cart"
        row = {k[2:]: v for k, v in params.items()}
        for existing in self.rows("cart"):
            if existing["uid"] == row["uid"] and _as_text(existing["product_id"]) == _as_text(row["product_id"]):
                existing["quantity"] += row["quantity"]
                return [{"quantity": existing["quantity"], "inserted": False}]
        self._insert("cart", row)
        return [{"quantity": row["quantity"], "inserted": True}]


class InMemoryLockService:
    def __init__(self):
        self.held: Dict[str, str] = {}
        self.acquired: List[str] = []
        self._mutex = threading.Lock()

    def acquire(self, key: str, token: str, ttl: int) -> bool:
        with self._mutex:
            if key in self.held:
                return False
            self.held[key] = token
            self.acquired.append(key)
            return True

    def release(self, key: str, token: str) -> bool:
        with self._mutex:
            if self.held.get(key) == token:
                del self.held[key]
                return True
            return False


class InMemoryQueue:
    def __init__(self):
        self.items: List[Dict[str, Any]] = []
        self.applied: set = set()

    def enqueue(self, adjustment):
        self.items.append(dict(adjustment))

    def pop_batch(self, size):
        batch, self.items = self.items[:size], self.items[size:]
        return batch

    def size(self):
        return len(self.items)

    def mark_applied(self, order_number, product_id):
        self.applied.add(f"{order_number}:{product_id}")

    def is_applied(self, order_number, product_id):
        return f"{order_number}:{product_id}" in self.applied


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def queue() -> InMemoryQueue:
    return InMemoryQueue()


@pytest.fixture
def lock_service() -> InMemoryLockService:
    return InMemoryLockService()


@pytest.fixture
def cart_service(backend) -> CartService:
    return CartService(backend, strategy="rpc")


@pytest.fixture
def stock_service(backend, queue) -> StockService:
    return StockService(backend, queue)


@pytest.fixture
def product():
    return {"id": 7, "title": "Wireless Earbuds", "images": ["a.jpg"], "price": 12000, "promo_price": 10000}
