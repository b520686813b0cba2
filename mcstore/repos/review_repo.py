# mcstore/repos/review_repo.py
from typing import Any, Dict, List

from mcstore.services.rest_gateway import RETURN_MINIMAL, RestGateway, build_query, eq

TABLE = "reviews"


class ReviewRepo:
    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    def list_for_product(self, product_id: Any) -> List[Dict[str, Any]]:
        path = build_query(TABLE, filters=[eq("product_id", product_id)], order="created_at.desc")
        return self.gateway.get(path) or []

    def create_review(self, review: Dict[str, Any]) -> None:
        self.gateway.post(TABLE, review, RETURN_MINIMAL)
