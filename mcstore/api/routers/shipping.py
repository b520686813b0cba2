# mcstore/api/routers/shipping.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from mcstore.api.deps import get_shipping_service
from mcstore.domain.schemas import RatesOut, RatesRequest, RecipientAddress
from mcstore.services.shipping_service import NIGERIAN_STATES, ShippingService, get_pickup_info

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/rates", response_model=RatesOut)
def get_rates(payload: RatesRequest, svc: ShippingService = Depends(get_shipping_service)):
    return svc.get_rates(
        payload.recipient_address.model_dump(),
        [i.model_dump() for i in payload.items],
        payload.total_weight,
    )


@router.post("/address/validate")
def validate_address(payload: RecipientAddress, svc: ShippingService = Depends(get_shipping_service)):
    return svc.validate_address(payload.model_dump())


@router.get("/track/{tracking_id}")
def track(tracking_id: str, svc: ShippingService = Depends(get_shipping_service)):
    info = svc.track_shipment(tracking_id)
    if info is None:
        raise HTTPException(status_code=404, detail="Tracking information not available")
    return info


@router.get("/pickup")
def pickup():
    return get_pickup_info()


@router.get("/states", response_model=List[str])
def states():
    return NIGERIAN_STATES
