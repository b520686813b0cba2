# mcstore/repos/product_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import RestGateway, build_query, eq, ilike

TABLE = "products"


class ProductRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def list_products(
        self,
        category: str | None = None,
        section: str | None = None,
        search: str | None = None,
        featured: bool = False,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        filters = [eq("is_active", True)]
        if category:
            filters.append(eq("category", category))
        if section:
            filters.append(eq("section", section))
        if featured:
            filters.append(eq("is_featured", True))
        if search:
            filters.append(ilike("name", search))

        path = build_query(TABLE, filters=filters, order="created_at.desc", limit=limit)
        return self.gateway.get(path) or []

    def get_product(self, product_id: Any) -> Dict[str, Any] | None:
        rows = self.gateway.get(build_query(TABLE, filters=[eq("id", product_id)]))
        return rows[0] if rows else None

    def list_categories(self) -> List[str]:
        path = build_query(TABLE, select="category", filters=[eq("is_active", True)])
        rows = self.gateway.get(path) or []
        return sorted({r["category"] for r in rows if r.get("category")})

    def get_stock(self, product_id: Any) -> int | None:
        rows = self.gateway.get(build_query(TABLE, select="stock", filters=[eq("id", product_id)]))
        if not rows:
            return None
        return int(rows[0].get("stock") or 0)

    def set_stock(self, product_id: Any, stock: int) -> None:
        path = build_query(TABLE, select=None, filters=[eq("id", product_id)])
        self.gateway.patch(path, {"stock": stock})
