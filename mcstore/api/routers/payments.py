# mcstore/api/routers/payments.py
from fastapi import APIRouter, Depends, Query

from mcstore.api.deps import get_payment_service, http_error
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import PaymentInitIn, PaymentInitOut
from mcstore.services.payment_service import (
    PaymentService,
    get_available_payment_methods,
    get_cod_limits,
    process_cod,
    validate_cod,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/methods")
def payment_methods(total: float = Query(..., ge=0)):
    return get_available_payment_methods(total)


@router.get("/cod/limits")
def cod_limits():
    return get_cod_limits()


@router.get("/cod/validate")
def cod_validate(total: float = Query(..., ge=0)):
    return validate_cod(total)


@router.post("/cod")
def cod_process(total: float = Query(..., ge=0)):
    try:
        return process_cod(total)
    except StoreError as e:
        raise http_error(e)


@router.post("/initialize", response_model=PaymentInitOut)
def initialize(payload: PaymentInitIn, svc: PaymentService = Depends(get_payment_service)):
    try:
        return svc.initiate_payment(
            email=payload.email,
            amount=payload.amount,
            order_id=payload.order_id,
            customer_name=payload.customer_name,
            phone=payload.phone,
        )
    except StoreError as e:
        raise http_error(e)


@router.get("/callback")
def callback(reference: str, svc: PaymentService = Depends(get_payment_service)):
    return svc.handle_callback(reference)


@router.get("/verify/{reference}")
def verify(reference: str, svc: PaymentService = Depends(get_payment_service)):
    return svc.verify_payment(reference)
