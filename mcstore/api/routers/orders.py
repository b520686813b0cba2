# mcstore/api/routers/orders.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from mcstore.api.deps import get_order_service, get_shipping_service, http_error
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import OrderCreate, OrderStatusIn
from mcstore.services.order_service import OrderService
from mcstore.services.shipping_service import ShippingService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", status_code=201)
def place_order(payload: OrderCreate, svc: OrderService = Depends(get_order_service)):
    """
    Zapis zamowienia, czyszczenie koszyka i korekta stanow.
    Blad zwraca tylko gdy nie udal sie sam zapis zamowienia.
    """
    try:
        return svc.place_order(payload.model_dump())
    except StoreError as e:
        raise http_error(e)


@router.get("/", response_model=List[Dict[str, Any]])
def list_all_orders(limit: int = Query(200, gt=0), svc: OrderService = Depends(get_order_service)):
    return svc.get_all_orders(limit)


@router.get("/user/{uid}", response_model=List[Dict[str, Any]])
def list_my_orders(uid: str, limit: int = Query(50, gt=0), svc: OrderService = Depends(get_order_service)):
    return svc.get_my_orders(uid, limit)


@router.get("/{order_id}")
def get_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    order = svc.get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/{order_id}/status")
def update_status(order_id: str, payload: OrderStatusIn, svc: OrderService = Depends(get_order_service)):
    try:
        svc.update_order_status(order_id, payload.status)
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}


@router.post("/{order_id}/shipment")
def book_shipment(
    order_id: str,
    svc: OrderService = Depends(get_order_service),
    shipping: ShippingService = Depends(get_shipping_service),
):
    order = svc.get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return shipping.book_shipment(order)
