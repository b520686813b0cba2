# mcstore/api/routers/wishlist.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from mcstore.api.deps import get_wishlist_service, http_error
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import WishlistAddIn, WishlistAddOut
from mcstore.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("/{uid}", response_model=List[Dict[str, Any]])
def get_wishlist(uid: str, svc: WishlistService = Depends(get_wishlist_service)):
    return svc.get_wishlist(uid)


@router.get("/{uid}/count")
def get_wishlist_count(uid: str, svc: WishlistService = Depends(get_wishlist_service)):
    return {"count": svc.get_wishlist_count(uid)}


@router.get("/{uid}/items/{product_id}")
def is_in_wishlist(uid: str, product_id: str, svc: WishlistService = Depends(get_wishlist_service)):
    return {"result": svc.is_in_wishlist(uid, product_id)}


@router.post("/items", response_model=WishlistAddOut)
def add_item(payload: WishlistAddIn, svc: WishlistService = Depends(get_wishlist_service)):
    try:
        return svc.add_to_wishlist(payload.uid, payload.product.model_dump())
    except StoreError as e:
        raise http_error(e)


@router.post("/items/move-to-cart")
def move_to_cart(payload: WishlistAddIn, svc: WishlistService = Depends(get_wishlist_service)):
    try:
        svc.move_to_cart(payload.uid, payload.product.model_dump())
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}


@router.delete("/{uid}/items/{product_id}")
def remove_item(uid: str, product_id: str, svc: WishlistService = Depends(get_wishlist_service)):
    try:
        svc.remove_from_wishlist(uid, product_id)
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}
