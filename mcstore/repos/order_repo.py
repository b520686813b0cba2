# mcstore/repos/order_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import RETURN_REPRESENTATION, RestGateway, build_query, eq

TABLE = "orders"


class OrderRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def create_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        result = self.gateway.post(TABLE, order, RETURN_REPRESENTATION)
        if isinstance(result, list):
            return result[0] if result else order
        return result or order

    def get_order(self, order_id: Any) -> Dict[str, Any] | None:
        rows = self.gateway.get(build_query(TABLE, filters=[eq("id", order_id)]))
        return rows[0] if rows else None

    def list_orders(self, uid: str | None = None, limit: int = 50) -> List[Dict[str, Any]]:
        filters = [eq("uid", uid)] if uid else []
        path = build_query(TABLE, filters=filters, order="created_at.desc", limit=limit)
        return self.gateway.get(path) or []

    def update_order(self, order_id: Any, changes: Dict[str, Any]) -> None:
        path = build_query(TABLE, select=None, filters=[eq("id", order_id)])
        self.gateway.patch(path, changes)
