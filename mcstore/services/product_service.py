# mcstore/services/product_service.py
from typing import Any, Dict, List

from mcstore.domain.results import ReadResult, safe_read
from mcstore.repos.product_repo import ProductRepo
from mcstore.services.product_normalizer import normalize_product
from mcstore.services.rest_gateway import RestGateway


class ProductService:
    """Tylko odczyt, produkty zmienia panel admina."""

    def __init__(self, gateway: RestGateway):
        self.repo = ProductRepo(gateway)

    def fetch_products(self, **filters: Any) -> ReadResult:
        return safe_read(
            "get_products",
            lambda: [normalize_product(p) for p in self.repo.list_products(**filters)],
            [],
        )

    def get_products(
        self,
        category: str | None = None,
        section: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        return self.fetch_products(category=category, section=section, search=search, limit=limit).data

    def get_products_by_category(self, category: str, limit: int = 50) -> List[Dict[str, Any]]:
        return self.get_products(category=category, limit=limit)

    def get_featured_products(self, limit: int = 50) -> List[Dict[str, Any]]:
        return self.fetch_products(featured=True, limit=limit).data

    def search_products(self, query: str, limit: int = 100) -> List[Dict[str, Any]]:
        return self.get_products(search=query, limit=limit)

    def get_product_by_id(self, product_id: Any) -> Dict[str, Any] | None:
        return safe_read(
            "get_product_by_id",
            lambda: normalize_product(self.repo.get_product(product_id)),
            None,
        ).data

    def get_categories(self) -> List[str]:
        return safe_read("get_categories", self.repo.list_categories, []).data
