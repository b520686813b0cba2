# mcstore/repos/customer_repo.py
from typing import Any, Dict

from mcstore.services.rest_gateway import RestGateway, build_query, eq

TABLE = "customers"


class CustomerRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def get_customer(self, uid: str) -> Dict[str, Any] | None:
        rows = self.gateway.get(build_query(TABLE, filters=[eq("uid", uid)]))
        return rows[0] if rows else None

    def find_by_phone(self, phone: str) -> Dict[str, Any] | None:
        path = build_query(TABLE, select="uid,email,phone", filters=[eq("phone", phone)], limit=1)
        rows = self.gateway.get(path)
        return rows[0] if rows else None

    def update_customer(self, uid: str, updates: Dict[str, Any]) -> None:
        path = build_query(TABLE, select=None, filters=[eq("uid", uid)])
        self.gateway.patch(path, updates)
