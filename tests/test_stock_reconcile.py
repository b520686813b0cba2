import json
from unittest.mock import MagicMock

import redis

from mcstore.services.stock_service import PENDING_KEY, StockAdjustmentQueue, StockService
from mcstore.tasks.reconcile import reconcile_stock


def _adjustment(product_id=1, quantity=2, order_number="MC-2025-100001", attempts=1):
    return {"product_id": product_id, "quantity": quantity, "order_number": order_number, "attempts": attempts}


def test_queue_uses_redis_list():
    client = MagicMock()
    pipe = client.pipeline.return_value
    pipe.execute.return_value = [[json.dumps(_adjustment())], True]
    client.llen.return_value = 0
    queue = StockAdjustmentQueue(client=client)

    queue.enqueue({"product_id": 1, "quantity": 2})
    client.rpush.assert_called_once_with(PENDING_KEY, '{"product_id": 1, "quantity": 2}')

    assert queue.pop_batch(10) == [_adjustment()]
    pipe.lrange.assert_called_once_with(PENDING_KEY, 0, 9)
    pipe.ltrim.assert_called_once_with(PENDING_KEY, 10, -1)
    assert queue.size() == 0


def test_pop_batch_keeps_entries_when_redis_fails_mid_batch():
    entries = [json.dumps(_adjustment(1)), json.dumps(_adjustment(2))]
    client = MagicMock()
    pipe = client.pipeline.return_value
    # pierwsza transakcja pada, nic nie zostaje zdjete z listy
    pipe.execute.side_effect = [redis.ConnectionError("reset"), [entries, True]]
    queue = StockAdjustmentQueue(client=client)

    batch = queue.pop_batch(10)

    assert [a["product_id"] for a in batch] == [1, 2]
    assert pipe.execute.call_count == 2
    client.lpop.assert_not_called()


def test_applied_set_is_per_order_with_expiry():
    client = MagicMock()
    client.sismember.return_value = True
    queue = StockAdjustmentQueue(client=client, applied_ttl=60)

    queue.mark_applied("MC-2025-100001", 7)
    pipe = client.pipeline.return_value
    pipe.sadd.assert_called_once_with("stock:adjustments:applied:MC-2025-100001", "7")
    pipe.expire.assert_called_once_with("stock:adjustments:applied:MC-2025-100001", 60)

    assert queue.is_applied("MC-2025-100001", 7) is True


def test_reconcile_applies_pending_adjustments(backend, queue):
    backend.seed("products", {"id": 1, "stock": 5})
    queue.enqueue(_adjustment())

    stats = reconcile_stock(StockService(backend, queue), queue, batch_size=10, max_attempts=5)

    assert stats == {"applied": 1, "skipped": 0, "requeued": 0, "dropped": 0}
    assert backend.rows("products")[0]["stock"] == 3
    assert queue.size() == 0
    assert queue.is_applied("MC-2025-100001", 1)


def test_reconcile_requeues_then_drops(backend, queue):
    backend.seed("products", {"id": 1, "stock": 5})
    backend.fail("PATCH", "products")
    service = StockService(backend, queue)
    queue.enqueue(_adjustment())

    stats = reconcile_stock(service, queue, batch_size=10, max_attempts=2)
    assert stats == {"applied": 0, "skipped": 0, "requeued": 1, "dropped": 0}
    assert queue.items[0]["attempts"] == 2

    stats = reconcile_stock(service, queue, batch_size=10, max_attempts=2)
    assert stats == {"applied": 0, "skipped": 0, "requeued": 0, "dropped": 1}
    assert queue.size() == 0
    assert backend.rows("products")[0]["stock"] == 5


def test_reconcile_continues_when_requeue_fails(backend, queue):
    backend.seed("products", {"id": 1, "stock": 5}, {"id": 2, "stock": 5})
    backend.fail("PATCH", "products", times=1)
    queue.enqueue(_adjustment(1))
    queue.enqueue(_adjustment(2))
    queue.enqueue = MagicMock(side_effect=redis.ConnectionError("redis down"))

    stats = reconcile_stock(StockService(backend, queue), queue, batch_size=10, max_attempts=5)

    assert stats == {"applied": 1, "skipped": 0, "requeued": 0, "dropped": 1}
    stock = {p["id"]: p["stock"] for p in backend.rows("products")}
    assert stock == {1: 5, 2: 3}


def test_replayed_adjustment_is_applied_once(backend, queue):
    backend.seed("products", {"id": 1, "stock": 5})
    service = StockService(backend, queue)

    assert service.decrement_or_queue(1, 2, "MC-2025-100001") is True
    queue.enqueue(_adjustment(1, 2, "MC-2025-100001"))

    stats = reconcile_stock(service, queue, batch_size=10, max_attempts=5)

    assert stats == {"applied": 0, "skipped": 1, "requeued": 0, "dropped": 0}
    assert backend.rows("products")[0]["stock"] == 3


def test_same_product_in_another_order_is_not_skipped(backend, queue):
    backend.seed("products", {"id": 1, "stock": 5})
    service = StockService(backend, queue)

    service.decrement_or_queue(1, 1, "MC-2025-100001")
    service.decrement_or_queue(1, 1, "MC-2025-100002")

    assert backend.rows("products")[0]["stock"] == 3


def test_applied_check_failure_still_decrements(backend):
    backend.seed("products", {"id": 1, "stock": 5})
    queue = MagicMock()
    queue.is_applied.side_effect = redis.ConnectionError("redis down")
    queue.mark_applied.side_effect = redis.ConnectionError("redis down")

    assert StockService(backend, queue).decrement_or_queue(1, 2, "MC-2025-100001") is True
    assert backend.rows("products")[0]["stock"] == 3
    queue.enqueue.assert_not_called()


def test_reconcile_respects_batch_size(backend, queue):
    backend.seed("products", {"id": 1, "stock": 10})
    for n in range(3):
        queue.enqueue(_adjustment(1, 1, f"MC-2025-10000{n}"))

    stats = reconcile_stock(StockService(backend, queue), queue, batch_size=2, max_attempts=5)

    assert stats["applied"] == 2
    assert queue.size() == 1


def test_defer_without_queue_does_not_raise(backend):
    backend.seed("products", {"id": 1, "stock": 5})
    backend.fail("GET", "products")

    assert StockService(backend).decrement_or_queue(1, 1, "MC-2025-100001") is False


def test_defer_survives_queue_failure(backend):
    queue = MagicMock()
    queue.is_applied.return_value = False
    queue.enqueue.side_effect = RuntimeError("redis down")
    backend.fail("GET", "products")

    assert StockService(backend, queue).decrement_or_queue(1, 1, "MC-2025-100001") is False
    queue.enqueue.assert_called_once()
