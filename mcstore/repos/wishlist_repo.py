# mcstore/repos/wishlist_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import (
    IGNORE_DUPLICATES,
    RETURN_REPRESENTATION,
    RestGateway,
    build_query,
    eq,
)

TABLE = "wishlist"


class WishlistRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def list_items(self, uid: str) -> List[Dict[str, Any]]:
        path = build_query(TABLE, filters=[eq("uid", uid)], order="added_at.desc")
        return self.gateway.get(path) or []

    def has_item(self, uid: str, product_id: Any) -> bool:
        path = build_query(TABLE, select="id", filters=[eq("uid", uid), eq("product_id", product_id)])
        return bool(self.gateway.get(path))

    def insert_if_absent(self, row: Dict[str, Any]) -> bool:
        """
        Insert z ignore-duplicates na (uid, product_id).
        Pusta reprezentacja = wiersz juz istnial, nic nie zapisano.
        """
        path = build_query(TABLE, select=None, on_conflict="uid,product_id")
        rows = self.gateway.post(path, row, IGNORE_DUPLICATES, RETURN_REPRESENTATION)
        return bool(rows)

    def delete_item(self, uid: str, product_id: Any) -> None:
        path = build_query(TABLE, select=None, filters=[eq("uid", uid), eq("product_id", product_id)])
        self.gateway.delete(path)
