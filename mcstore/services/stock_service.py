# mcstore/services/stock_service.py
import json
from typing import Any, Dict, List

import redis

from mcstore.repos.product_repo import ProductRepo
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils import settings
from mcstore.utils.logging import get_logger
from mcstore.utils.retry import redis_retry

logger = get_logger(__name__)

PENDING_KEY = "stock:adjustments:pending"
APPLIED_KEY = "stock:adjustments:applied:{order_number}"


class StockAdjustmentQueue:
    """
    Kolejka korekt stanu magazynu ktore nie przeszly przy skladaniu zamowienia.
    Lista w redis, wpis = {"product_id", "quantity", "order_number", "attempts"}.
    Zastosowane korekty trafiaja do zbioru per zamowienie, powtorka jest pomijana.
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        applied_ttl: int | None = None,
    ):
        self.redis = client or redis.Redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
        )
        self.applied_ttl = applied_ttl or settings.STOCK_APPLIED_TTL_SECONDS

    @redis_retry()
    def enqueue(self, adjustment: Dict[str, Any]) -> None:
        self.redis.rpush(PENDING_KEY, json.dumps(adjustment))

    @redis_retry()
    def pop_batch(self, size: int) -> List[Dict[str, Any]]:
        # LRANGE + LTRIM w MULTI: albo cala paczka zdjeta, albo nic
        pipe = self.redis.pipeline(transaction=True)
        pipe.lrange(PENDING_KEY, 0, size - 1)
        pipe.ltrim(PENDING_KEY, size, -1)
        raw_items, _ = pipe.execute()
        return [json.loads(raw) for raw in raw_items]

    @redis_retry()
    def size(self) -> int:
        return int(self.redis.llen(PENDING_KEY))

    @redis_retry()
    def mark_applied(self, order_number: str, product_id: Any) -> None:
        key = APPLIED_KEY.format(order_number=order_number)
        pipe = self.redis.pipeline(transaction=True)
        pipe.sadd(key, str(product_id))
        pipe.expire(key, self.applied_ttl)
        pipe.execute()

    @redis_retry()
    def is_applied(self, order_number: str, product_id: Any) -> bool:
        key = APPLIED_KEY.format(order_number=order_number)
        return bool(self.redis.sismember(key, str(product_id)))


class StockService:
    def __init__(self, gateway: RestGateway, queue: StockAdjustmentQueue | None = None):
        self.products = ProductRepo(gateway)
        self.queue = queue

    def decrement(self, product_id: Any, quantity: int) -> int | None:
        """Ustawia stock = max(0, stock - quantity). None gdy produktu nie ma."""
        current = self.products.get_stock(product_id)
        if current is None:
            logger.warning(f"Stock adjustment skipped, product {product_id} not found")
            return None

        new_stock = max(0, current - quantity)
        self.products.set_stock(product_id, new_stock)
        logger.info(f"Stock of {product_id}: {current} -> {new_stock}")
        return new_stock

    def apply_once(self, product_id: Any, quantity: int, order_number: str) -> bool:
        """
        Korekta dla pozycji zamowienia najwyzej raz.
        False gdy juz byla zastosowana i nic nie zrobiono.
        """
        if self._already_applied(order_number, product_id):
            logger.info(f"Stock adjustment {order_number}:{product_id} already applied, skipping")
            return False

        self.decrement(product_id, quantity)
        self._mark_applied(order_number, product_id)
        return True

    def _already_applied(self, order_number: str, product_id: Any) -> bool:
        if self.queue is None:
            return False
        try:
            return self.queue.is_applied(order_number, product_id)
        except Exception as e:
            # brak odpowiedzi z redis = korekta traktowana jako niezastosowana
            logger.warning(f"Could not check {order_number}:{product_id} in applied set: {e}")
            return False

    def _mark_applied(self, order_number: str, product_id: Any) -> None:
        if self.queue is None:
            return
        try:
            self.queue.mark_applied(order_number, product_id)
        except Exception as e:
            logger.warning(f"Could not mark {order_number}:{product_id} as applied: {e}")

    def decrement_or_queue(self, product_id: Any, quantity: int, order_number: str) -> bool:
        """
        Jedna pozycja zamowienia. Blad nie przerywa zamowienia,
        korekta idzie do kolejki dla reconcilera.
        """
        try:
            self.apply_once(product_id, quantity, order_number)
            return True
        except Exception as e:
            logger.warning(f"Stock update for {product_id} ({order_number}) failed: {e}")
            self.defer(
                {
                    "product_id": product_id,
                    "quantity": quantity,
                    "order_number": order_number,
                    "attempts": 1,
                }
            )
            return False

    def defer(self, adjustment: Dict[str, Any]) -> bool:
        if self.queue is None:
            logger.error(f"No adjustment queue, dropping {adjustment}")
            return False
        try:
            self.queue.enqueue(adjustment)
            return True
        except Exception as e:
            logger.error(f"Could not queue stock adjustment {adjustment}: {e}")
            return False
