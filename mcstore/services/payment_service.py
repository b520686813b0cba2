# mcstore/services/payment_service.py
import time
from typing import Any, Callable, Dict, Tuple

import requests
from requests import RequestException

from mcstore.domain.errors import StoreError, ValidationError
from mcstore.utils import settings
from mcstore.utils.logging import get_logger
from mcstore.utils.money import format_naira, from_kobo, to_kobo

logger = get_logger(__name__)

METHOD_ONLINE = "online"
METHOD_CASH_ON_DELIVERY = "cash_on_delivery"

_paystack_session: requests.Session | None = None


def load_paystack_session() -> requests.Session:
    """Sesja HTTP do paystack tworzona raz na proces."""
    global _paystack_session
    if _paystack_session is None:
        _paystack_session = requests.Session()
        _paystack_session.headers.update(
            {
                "Authorization": f"Bearer {settings.PAYSTACK_SECRET_KEY}",
                "Content-Type": "application/json",
            }
        )
        logger.info("Paystack session created")
    return _paystack_session


def _now_ms() -> int:
    return int(time.time() * 1000)


def validate_cod(total_amount: float, cod_min: int | None = None, cod_max: int | None = None) -> Dict[str, Any]:
    cod_min = settings.COD_MIN if cod_min is None else cod_min
    cod_max = settings.COD_MAX if cod_max is None else cod_max

    if total_amount < cod_min:
        return {
            "valid": False,
            "reason": (
                f"Cash on Delivery is only available for orders of {format_naira(cod_min)} and above. "
                f"Your order total is {format_naira(total_amount)}."
            ),
        }
    if total_amount > cod_max:
        return {
            "valid": False,
            "reason": (
                f"Cash on Delivery is only available for orders up to {format_naira(cod_max)}. "
                "Please pay online for this order."
            ),
        }
    return {"valid": True}


def process_cod(total_amount: float) -> Dict[str, Any]:
    check = validate_cod(total_amount)
    if not check["valid"]:
        raise ValidationError(check["reason"])

    return {
        "method": METHOD_CASH_ON_DELIVERY,
        "status": "pending",
        "reference": f"COD-{_now_ms()}",
        "amount": total_amount,
    }


def get_cod_limits() -> Dict[str, Any]:
    return {
        "min": settings.COD_MIN,
        "max": settings.COD_MAX,
        "min_formatted": format_naira(settings.COD_MIN),
        "max_formatted": format_naira(settings.COD_MAX),
    }


def get_available_payment_methods(total_amount: float) -> Dict[str, Any]:
    cod = validate_cod(total_amount)

    if cod["valid"]:
        cod_sublabel = "Pay when your order arrives"
    elif total_amount < settings.COD_MIN:
        cod_sublabel = f"Minimum order {format_naira(settings.COD_MIN)} required"
    else:
        cod_sublabel = f"Maximum {format_naira(settings.COD_MAX)} for COD"

    return {
        METHOD_ONLINE: {
            "available": True,
            "label": "Pay Online",
            "sublabel": "Card, Bank Transfer, USSD",
        },
        METHOD_CASH_ON_DELIVERY: {
            "available": cod["valid"],
            "label": "Cash on Delivery",
            "sublabel": cod_sublabel,
            "disabled_reason": None if cod["valid"] else cod["reason"],
        },
    }


class PaymentService:
    """
    Platnosci online przez paystack:
    - initiate_payment otwiera transakcje i zwraca authorization_url
    - handle_callback weryfikuje referencje i wola on_success / on_cancel
    Pobranie pieniedzy i tak robi paystack, tu tylko przekazujemy wynik.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 15,
        handler_ttl: float | None = None,
    ):
        self.base_url = (base_url or settings.PAYSTACK_BASE_URL).rstrip("/")
        self._session = session
        self.timeout = timeout
        self.handler_ttl = settings.PAYMENT_HANDLER_TTL_SECONDS if handler_ttl is None else handler_ttl
        # reference -> (zarejestrowano o, on_success, on_cancel), w kolejnosci dodania
        self._handlers: Dict[str, Tuple[float, Callable | None, Callable | None]] = {}

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = load_paystack_session()
        return self._session

    def initiate_payment(
        self,
        email: str,
        amount: float,
        order_id: str,
        customer_name: str | None = None,
        phone: str | None = None,
        on_success: Callable[[Dict[str, Any]], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
    ) -> Dict[str, Any]:
        reference = f"MC-{order_id}-{_now_ms()}"
        payload = {
            "email": email,
            "amount": to_kobo(amount),
            "currency": "NGN",
            "reference": reference,
            "metadata": {
                "custom_fields": [
                    {"display_name": "Order ID", "variable_name": "order_id", "value": order_id},
                    {"display_name": "Customer Name", "variable_name": "customer_name", "value": customer_name or ""},
                    {"display_name": "Phone", "variable_name": "phone", "value": phone or ""},
                ]
            },
        }
        if settings.PAYSTACK_CALLBACK_URL:
            payload["callback_url"] = settings.PAYSTACK_CALLBACK_URL

        try:
            resp = self.session.post(f"{self.base_url}/transaction/initialize", json=payload, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json().get("data") or {}
        except (RequestException, ValueError) as e:
            logger.error(f"initiate_payment failed for {order_id}: {e}")
            raise StoreError("Could not open payment. Please try again.") from e

        reference = data.get("reference") or reference
        self.register_handlers(reference, on_success, on_cancel)
        logger.info(f"Payment {reference} initialised for order {order_id}")

        return {
            "authorization_url": data.get("authorization_url"),
            "access_code": data.get("access_code"),
            "reference": reference,
        }

    def register_handlers(
        self,
        reference: str,
        on_success: Callable[[Dict[str, Any]], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
    ) -> bool:
        """Handlery na jeden callback. Porzucone platnosci wygasaja po handler_ttl."""
        self._prune_handlers()
        if on_success is None and on_cancel is None:
            return False
        self._handlers[reference] = (time.monotonic(), on_success, on_cancel)
        return True

    def _prune_handlers(self) -> None:
        now = time.monotonic()
        expired = [ref for ref, (added, _, _) in list(self._handlers.items()) if now - added >= self.handler_ttl]
        for ref in expired:
            self._handlers.pop(ref, None)
        if expired:
            logger.info(f"Dropped {len(expired)} expired payment handlers")

    def verify_payment(self, reference: str) -> Dict[str, Any]:
        try:
            resp = self.session.get(f"{self.base_url}/transaction/verify/{reference}", timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json().get("data") or {}
        except (RequestException, ValueError) as e:
            logger.warning(f"verify_payment failed for {reference}: {e}")
            return {"verified": False, "reference": reference}

        return {
            "verified": data.get("status") == "success",
            "reference": reference,
            "transaction": data.get("id"),
            "amount": from_kobo(data.get("amount")),
            "paid_at": data.get("paid_at"),
        }

    def handle_callback(self, reference: str) -> Dict[str, Any]:
        """Wynik z paystack -> handler zarejestrowany w initiate_payment (jednorazowo)."""
        _, on_success, on_cancel = self._handlers.pop(reference, (None, None, None))
        result = self.verify_payment(reference)

        if result["verified"]:
            paid = {"reference": reference, "transaction": result.get("transaction"), "status": "paid"}
            if on_success:
                on_success(paid)
            return paid

        if on_cancel:
            on_cancel()
        return {"reference": reference, "status": "cancelled"}
