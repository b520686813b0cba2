# mcstore/services/wishlist_service.py
from typing import Any, Dict, List

from mcstore.domain.errors import StoreError
from mcstore.domain.results import ReadResult, safe_read
from mcstore.repos.wishlist_repo import WishlistRepo
from mcstore.services.cart_service import CartService
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService:
    def __init__(self, gateway: RestGateway, cart_service: CartService):
        self.repo = WishlistRepo(gateway)
        self.cart_service = cart_service

    def fetch_wishlist(self, uid: str) -> ReadResult:
        return safe_read("get_wishlist", lambda: self.repo.list_items(uid), [])

    def get_wishlist(self, uid: str) -> List[Dict[str, Any]]:
        return self.fetch_wishlist(uid).data

    def get_wishlist_count(self, uid: str) -> int:
        return len(self.get_wishlist(uid))

    def is_in_wishlist(self, uid: str, product_id: Any) -> bool:
        return safe_read("is_in_wishlist", lambda: self.repo.has_item(uid, product_id), False).data

    def add_to_wishlist(self, uid: str, product: Dict[str, Any]) -> Dict[str, str]:
        images = product.get("images")
        row = {
            "uid": uid,
            "product_id": product["id"],
            "name": product.get("name") or product.get("title") or "",
            "image_url": product.get("image_url") or (images[0] if isinstance(images, list) and images else ""),
            "price": product.get("display_price") or product.get("price"),
        }

        try:
            inserted = self.repo.insert_if_absent(row)
        except Exception as e:
            logger.error(f"add_to_wishlist failed for {uid}/{row['product_id']}: {e}")
            raise StoreError("Could not add to wishlist. Please try again.") from e

        return {"action": "added" if inserted else "already_exists"}

    def remove_from_wishlist(self, uid: str, product_id: Any) -> bool:
        try:
            self.repo.delete_item(uid, product_id)
        except Exception as e:
            logger.error(f"remove_from_wishlist failed for {uid}/{product_id}: {e}")
            raise StoreError("Could not remove from wishlist. Please try again.") from e
        return True

    def move_to_cart(self, uid: str, product: Dict[str, Any]) -> bool:
        try:
            self.cart_service.add_to_cart(uid, product)
            self.repo.delete_item(uid, product["id"])
        except Exception as e:
            logger.error(f"move_to_cart failed for {uid}/{product.get('id')}: {e}")
            raise StoreError("Could not move item to cart. Please try again.") from e
        return True
