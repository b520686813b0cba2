# mcstore/api/routers/carts.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from mcstore.api.deps import get_cart_service, http_error
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import CartAddIn, CartAddOut, CartQuantityIn
from mcstore.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/{uid}", response_model=List[Dict[str, Any]])
def get_cart(uid: str, svc: CartService = Depends(get_cart_service)):
    return svc.get_cart(uid)


@router.get("/{uid}/count")
def get_cart_count(uid: str, svc: CartService = Depends(get_cart_service)):
    return {"count": svc.get_cart_count(uid)}


@router.get("/{uid}/total")
def get_cart_total(uid: str, svc: CartService = Depends(get_cart_service)):
    return {"total": svc.get_cart_total(uid)}


@router.post("/items", response_model=CartAddOut)
def add_item(payload: CartAddIn, svc: CartService = Depends(get_cart_service)):
    try:
        return svc.add_to_cart(payload.uid, payload.product.model_dump(), payload.quantity)
    except StoreError as e:
        raise http_error(e)


@router.patch("/items/{product_id}")
def update_quantity(product_id: str, payload: CartQuantityIn, svc: CartService = Depends(get_cart_service)):
    try:
        svc.update_quantity(payload.uid, product_id, payload.quantity)
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}


@router.delete("/{uid}/items/{product_id}")
def remove_item(uid: str, product_id: str, svc: CartService = Depends(get_cart_service)):
    try:
        svc.remove_from_cart(uid, product_id)
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}


@router.delete("/{uid}")
def clear_cart(uid: str, svc: CartService = Depends(get_cart_service)):
    return {"ok": svc.clear_cart(uid)}
