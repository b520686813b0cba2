# mcstore/services/review_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from mcstore.domain.errors import StoreError, ValidationError
from mcstore.domain.results import safe_read
from mcstore.repos.review_repo import ReviewRepo
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, gateway: RestGateway):
        self.repo = ReviewRepo(gateway)

    def get_reviews(self, product_id: Any) -> List[Dict[str, Any]]:
        return safe_read("get_reviews", lambda: self.repo.list_for_product(product_id), []).data

    def add_review(
        self,
        uid: str,
        product_id: Any,
        user_name: str | None,
        rating: int,
        comment: str | None = None,
    ) -> bool:
        if not 1 <= int(rating) <= 5:
            raise ValidationError("Rating must be between 1 and 5.")

        # bez unikalnosci, jeden user moze dodac kilka opinii
        name = user_name or "Customer"
        review = {
            "uid": uid,
            "user_id": uid,
            "product_id": product_id,
            "user_name": name,
            "customer_name": name,
            "rating": int(rating),
            "comment": comment or "",
            "verified": True,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            self.repo.create_review(review)
        except Exception as e:
            logger.error(f"add_review failed for {uid}/{product_id}: {e}")
            raise StoreError("Could not submit review. Please try again.") from e
        return True
