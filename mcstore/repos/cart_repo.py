# mcstore/repos/cart_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import RETURN_MINIMAL, RestGateway, build_query, eq

TABLE = "cart"
UPSERT_FUNCTION = "add_to_cart"


class CartRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def _key(self, uid: str, product_id: Any):
        return [eq("uid", uid), eq("product_id", product_id)]

    def list_items(self, uid: str) -> List[Dict[str, Any]]:
        path = build_query(TABLE, filters=[eq("uid", uid)], order="added_at.desc")
        return self.gateway.get(path) or []

    def get_item(self, uid: str, product_id: Any) -> Dict[str, Any] | None:
        rows = self.gateway.get(build_query(TABLE, filters=self._key(uid, product_id)))
        return rows[0] if rows else None

    def upsert_increment(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Jeden atomowy zapis po stronie bazy (migrations/001_cart_upsert.sql):
        insert ... on conflict (uid, product_id) do update quantity = quantity + excluded.quantity
        Zwraca {"quantity": .., "inserted": ..}.
        """
        result = self.gateway.rpc(UPSERT_FUNCTION, {f"p_{k}": v for k, v in row.items()})
        if isinstance(result, list):
            result = result[0] if result else {}
        return result or {}

    def insert_item(self, row: Dict[str, Any]) -> None:
        self.gateway.post(TABLE, row, RETURN_MINIMAL)

    def set_quantity(self, uid: str, product_id: Any, quantity: int) -> None:
        path = build_query(TABLE, select=None, filters=self._key(uid, product_id))
        self.gateway.patch(path, {"quantity": quantity})

    def delete_item(self, uid: str, product_id: Any) -> None:
        self.gateway.delete(build_query(TABLE, select=None, filters=self._key(uid, product_id)))

    def delete_all(self, uid: str) -> None:
        self.gateway.delete(build_query(TABLE, select=None, filters=[eq("uid", uid)]))
