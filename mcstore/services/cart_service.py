# mcstore/services/cart_service.py
import uuid
from typing import Any, Dict, List

from mcstore.domain.errors import ConflictError, StoreError, ValidationError
from mcstore.domain.results import ReadResult, safe_read
from mcstore.repos.cart_repo import CartRepo
from mcstore.services.lock_service import LockService
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils import settings
from mcstore.utils.logging import get_logger
from mcstore.utils.retry import lock_wait

logger = get_logger(__name__)

STRATEGY_RPC = "rpc"
STRATEGY_LOCKED = "locked"


def cart_row(uid: str, product: Dict[str, Any], quantity: int) -> Dict[str, Any]:
    images = product.get("images")
    return {
        "uid": uid,
        "product_id": product["id"],
        "name": product.get("name") or product.get("title") or "",
        "image_url": product.get("image_url") or (images[0] if isinstance(images, list) and images else ""),
        # cena z momentu dodania do koszyka
        "price": product.get("display_price") or product.get("promo_price") or product.get("price"),
        "quantity": quantity,
    }


class CartService:
    """
    Koszyk = jeden wiersz na (uid, product_id), ilosc sie sumuje.
    Odczyty nie rzucaja (fetch_* zwraca ReadResult, get_* sama wartosc),
    zapisy rzucaja StoreError z komunikatem dla uzytkownika.
    """

    def __init__(
        self,
        gateway: RestGateway,
        lock_service: LockService | None = None,
        strategy: str | None = None,
        lock_wait_seconds: float | None = None,
    ):
        self.repo = CartRepo(gateway)
        self.lock_service = lock_service
        self.strategy = strategy or settings.CART_UPSERT_STRATEGY
        self.lock_wait_seconds = (
            settings.CART_LOCK_WAIT_SECONDS if lock_wait_seconds is None else lock_wait_seconds
        )

        if self.strategy not in (STRATEGY_RPC, STRATEGY_LOCKED):
            raise ValueError(f"Unknown cart upsert strategy: {self.strategy}")
        if self.strategy == STRATEGY_LOCKED and lock_service is None:
            raise ValueError("Locked cart strategy needs a LockService")

    #query
    def fetch_cart(self, uid: str) -> ReadResult:
        return safe_read("get_cart", lambda: self.repo.list_items(uid), [])

    def get_cart(self, uid: str) -> List[Dict[str, Any]]:
        return self.fetch_cart(uid).data

    def get_cart_count(self, uid: str) -> int:
        return sum(int(i.get("quantity") or 0) for i in self.get_cart(uid))

    def get_cart_total(self, uid: str) -> float:
        return sum(float(i.get("price") or 0) * int(i.get("quantity") or 0) for i in self.get_cart(uid))

    #commands
    def add_to_cart(self, uid: str, product: Dict[str, Any], quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1.")

        row = cart_row(uid, product, quantity)
        try:
            if self.strategy == STRATEGY_RPC:
                result = self._add_atomic(row)
            else:
                result = self._add_locked(row)
        except ConflictError:
            raise
        except Exception as e:
            logger.error(f"add_to_cart failed for {uid}/{row['product_id']}: {e}")
            raise StoreError("Could not add item to cart. Please try again.") from e

        logger.info(f"Cart {uid}: product {row['product_id']} {result['action']}, qty {result['quantity']}")
        return result

    def _add_atomic(self, row: Dict[str, Any]) -> Dict[str, Any]:
        res = self.repo.upsert_increment(row)
        return {
            "action": "added" if res.get("inserted") else "updated",
            "quantity": int(res.get("quantity", row["quantity"])),
        }

    def _add_locked(self, row: Dict[str, Any]) -> Dict[str, Any]:
        key = f"cart:{row['uid']}:{row['product_id']}"
        token = uuid.uuid4().hex

        if not self._acquire(key, token):
            raise ConflictError("This item is being updated. Please try again.")

        try:
            existing = self.repo.get_item(row["uid"], row["product_id"])
            if existing:
                new_qty = int(existing.get("quantity") or 0) + row["quantity"]
                self.repo.set_quantity(row["uid"], row["product_id"], new_qty)
                return {"action": "updated", "quantity": new_qty}

            self.repo.insert_item(row)
            return {"action": "added", "quantity": row["quantity"]}
        finally:
            self.lock_service.release(key, token)

    def _acquire(self, key: str, token: str) -> bool:
        # zapisy na tym samym (uid, product_id) ida po kolei, czekamy na swoja kolej
        @lock_wait(self.lock_wait_seconds)
        def attempt() -> bool:
            return self.lock_service.acquire(key, token, settings.CART_LOCK_TTL_SECONDS)

        return attempt()

    def update_quantity(self, uid: str, product_id: Any, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove_from_cart(uid, product_id)

        try:
            self.repo.set_quantity(uid, product_id, quantity)
        except Exception as e:
            logger.error(f"update_quantity failed for {uid}/{product_id}: {e}")
            raise StoreError("Could not update cart. Please try again.") from e
        return True

    def remove_from_cart(self, uid: str, product_id: Any) -> bool:
        try:
            self.repo.delete_item(uid, product_id)
        except Exception as e:
            logger.error(f"remove_from_cart failed for {uid}/{product_id}: {e}")
            raise StoreError("Could not remove item. Please try again.") from e
        return True

    def clear_cart(self, uid: str) -> bool:
        # best effort, zwykle sprzatanie po zamowieniu
        try:
            self.repo.delete_all(uid)
            return True
        except Exception as e:
            logger.warning(f"clear_cart failed for {uid}: {e}")
            return False
