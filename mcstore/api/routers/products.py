# mcstore/api/routers/products.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from mcstore.api.deps import get_product_service, get_review_service, http_error
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import ReviewIn
from mcstore.services.product_service import ProductService
from mcstore.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[Dict[str, Any]])
def list_products(
    category: str | None = None,
    section: str | None = None,
    search: str | None = None,
    limit: int | None = Query(None, gt=0),
    svc: ProductService = Depends(get_product_service),
):
    return svc.get_products(category=category, section=section, search=search, limit=limit)


@router.get("/featured", response_model=List[Dict[str, Any]])
def featured_products(limit: int = Query(50, gt=0), svc: ProductService = Depends(get_product_service)):
    return svc.get_featured_products(limit)


@router.get("/categories", response_model=List[str])
def categories(svc: ProductService = Depends(get_product_service)):
    return svc.get_categories()


@router.get("/{product_id}")
def get_product(product_id: str, svc: ProductService = Depends(get_product_service)):
    product = svc.get_product_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}/reviews", response_model=List[Dict[str, Any]])
def list_reviews(product_id: str, svc: ReviewService = Depends(get_review_service)):
    return svc.get_reviews(product_id)


@router.post("/{product_id}/reviews", status_code=201)
def add_review(product_id: str, payload: ReviewIn, svc: ReviewService = Depends(get_review_service)):
    try:
        svc.add_review(
            uid=payload.uid,
            product_id=product_id,
            user_name=payload.user_name,
            rating=payload.rating,
            comment=payload.comment,
        )
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}
