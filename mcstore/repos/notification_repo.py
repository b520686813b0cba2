# mcstore/repos/notification_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import RestGateway, build_query, eq

TABLE = "notifs"


class NotificationRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def list_for_user(self, uid: str, limit: int = 30) -> List[Dict[str, Any]]:
        path = build_query(TABLE, filters=[eq("uid", uid)], order="created_at.desc", limit=limit)
        return self.gateway.get(path) or []

    def list_unread(self, uid: str) -> List[Dict[str, Any]]:
        path = build_query(TABLE, select="id", filters=[eq("uid", uid), eq("is_read", False)])
        return self.gateway.get(path) or []

    def mark_read(self, notif_id: Any) -> None:
        path = build_query(TABLE, select=None, filters=[eq("id", notif_id)])
        self.gateway.patch(path, {"is_read": True})
