# mcstore/services/order_service.py
import json
import random
from datetime import datetime, timezone
from typing import Any, Dict, List

from mcstore.domain.errors import StoreError
from mcstore.domain.results import ReadResult, safe_read
from mcstore.repos.order_repo import OrderRepo
from mcstore.services.cart_service import CartService
from mcstore.services.rest_gateway import RestGateway
from mcstore.services.stock_service import StockService
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)


def generate_order_number(now: datetime | None = None) -> str:
    # MC-2025-123456, losowy sufiks bez sprawdzania unikalnosci
    year = (now or datetime.now(timezone.utc)).year
    return f"MC-{year}-{random.randint(100000, 999999)}"


def _decode_items(order: Dict[str, Any]) -> Dict[str, Any]:
    items = order.get("items")
    if isinstance(items, str):
        try:
            items = json.loads(items)
        except ValueError:
            items = []
    return {**order, "items": items or []}


class OrderService:
    """
    Zlozenie zamowienia:
    1. numer zamowienia
    2. insert zamowienia (jedyny krok ktory moze wywrocic operacje)
    3. czyszczenie koszyka (best effort)
    4. korekta stanow per pozycja (best effort, bledy do kolejki)
    Brak transakcji miedzy krokami.
    """

    def __init__(self, gateway: RestGateway, cart_service: CartService, stock_service: StockService):
        self.repo = OrderRepo(gateway)
        self.cart_service = cart_service
        self.stock_service = stock_service

    def place_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        order_number = generate_order_number(now)
        items = order_data.get("items") or []
        payment_ref = order_data.get("payment_ref") or ""

        record = {
            "order_number": order_number,
            "uid": order_data["uid"],
            "customer_name": order_data.get("customer_name"),
            "customer_email": order_data.get("customer_email"),
            "customer_phone": order_data.get("customer_phone"),
            "items": json.dumps(items),
            "delivery_street": order_data.get("delivery_street"),
            "delivery_city": order_data.get("delivery_city"),
            "delivery_state": order_data.get("delivery_state"),
            "delivery_landmark": order_data.get("delivery_landmark") or "",
            "payment_method": order_data.get("payment_method") or "paystack",
            "payment_status": "paid" if payment_ref else "pending",
            "payment_ref": payment_ref,
            "status": "processing",
            "subtotal": order_data.get("subtotal"),
            "delivery_fee": order_data.get("delivery_fee") or 0,
            "discount": order_data.get("discount") or 0,
            "total": order_data.get("total"),
            "created_at": now.isoformat(),
            "updated_at": now.isoformat(),
        }

        try:
            created = self.repo.create_order(record)
        except Exception as e:
            logger.error(f"place_order failed for {order_data.get('uid')}: {e}")
            raise StoreError("Could not place your order. Please try again.") from e

        logger.info(f"Order {order_number} created for {record['uid']}")

        self.cart_service.clear_cart(record["uid"])

        for item in items:
            product_id = item.get("product_id") or item.get("id")
            if product_id is None:
                continue
            self.stock_service.decrement_or_queue(product_id, int(item.get("quantity") or 1), order_number)

        return created

    #query
    def fetch_my_orders(self, uid: str, limit: int = 50) -> ReadResult:
        return safe_read(
            "get_my_orders",
            lambda: [_decode_items(o) for o in self.repo.list_orders(uid=uid, limit=limit)],
            [],
        )

    def get_my_orders(self, uid: str, limit: int = 50) -> List[Dict[str, Any]]:
        return self.fetch_my_orders(uid, limit).data

    def get_all_orders(self, limit: int = 200) -> List[Dict[str, Any]]:
        return safe_read(
            "get_all_orders",
            lambda: [_decode_items(o) for o in self.repo.list_orders(limit=limit)],
            [],
        ).data

    def get_order_by_id(self, order_id: Any) -> Dict[str, Any] | None:
        def load():
            order = self.repo.get_order(order_id)
            return _decode_items(order) if order else None

        return safe_read("get_order_by_id", load, None).data

    def update_order_status(self, order_id: Any, status: str) -> bool:
        try:
            self.repo.update_order(
                order_id,
                {"status": status, "updated_at": datetime.now(timezone.utc).isoformat()},
            )
        except Exception as e:
            logger.error(f"update_order_status failed for {order_id}: {e}")
            raise StoreError("Could not update order.") from e

        logger.info(f"Order {order_id} status -> {status}")
        return True
