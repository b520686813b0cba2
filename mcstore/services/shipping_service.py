# mcstore/services/shipping_service.py
import json
from typing import Any, Dict, List, Tuple

import requests
from requests import RequestException

from mcstore.utils import settings
from mcstore.utils.logging import get_logger
from mcstore.utils.money import format_naira

logger = get_logger(__name__)

SOURCE_LIVE = "shipbubble"
SOURCE_FALLBACK = "fallback"

STORE_ADDRESS = {
    "name": "MC Store",
    "email": "mcstore.care@gmail.com",
    "phone": "08056230366",
    "address": "Opposite Bovas Filling Station, Bodija, Ibadan, Oyo State, Nigeria",
    "city": "Ibadan",
    "state": "Oyo",
    "country": "NG",
}

PACKAGE_DIMENSIONS = {"length": 20, "width": 15, "height": 10}
DEFAULT_ITEM_WEIGHT = 0.3
MIN_PACKAGE_WEIGHT = 0.5

NIGERIAN_STATES = [
    "Abia", "Adamawa", "Akwa Ibom", "Anambra", "Bauchi",
    "Bayelsa", "Benue", "Borno", "Cross River", "Delta",
    "Ebonyi", "Edo", "Ekiti", "Enugu", "FCT - Abuja",
    "Gombe", "Imo", "Jigawa", "Kaduna", "Kano",
    "Katsina", "Kebbi", "Kogi", "Kwara", "Lagos",
    "Nasarawa", "Niger", "Ogun", "Ondo", "Osun",
    "Oyo", "Plateau", "Rivers", "Sokoto", "Taraba",
    "Yobe", "Zamfara",
]

# (slowa kluczowe stanu, prefiks id, (express fee, eta), (standard fee, eta))
# kolejnosc ma znaczenie, pierwsze dopasowanie wygrywa
_FLAT_RATE_ZONES: List[Tuple[Tuple[str, ...], str, Tuple[int, str], Tuple[int, str]]] = [
    (("oyo",), "local", (1500, "Same day / Next day"), (800, "1-2 business days")),
    (("lagos",), "lagos", (3500, "1-2 business days"), (2000, "2-3 business days")),
    (("abuja", "fct"), "abuja", (4000, "2-3 business days"), (2500, "3-5 business days")),
    (
        ("osun", "ondo", "ekiti", "ogun", "kwara", "kogi", "edo"),
        "sw",
        (2500, "1-3 business days"),
        (1500, "2-4 business days"),
    ),
    (
        ("rivers", "delta", "anambra", "imo", "enugu", "abia", "akwa"),
        "ss",
        (4500, "2-4 business days"),
        (2800, "3-5 business days"),
    ),
]
_REST_OF_COUNTRY = ("ng", (5500, "3-5 business days"), (3500, "5-7 business days"))


def flat_rates(state: str | None = "") -> List[Dict[str, Any]]:
    s = (state or "").lower()

    prefix, express, standard = _REST_OF_COUNTRY
    for keywords, zone, zone_express, zone_standard in _FLAT_RATE_ZONES:
        if any(k in s for k in keywords):
            prefix, express, standard = zone, zone_express, zone_standard
            break

    return [
        {
            "courier_id": f"{prefix}-{code}",
            "courier_name": f"{code.title()} Delivery",
            "service_code": code,
            "delivery_fee": fee,
            "eta": eta,
            "logo": "",
        }
        for code, (fee, eta) in (("express", express), ("standard", standard))
    ]


def _map_rate(raw: Dict[str, Any]) -> Dict[str, Any]:
    # shipbubble zwraca rozne nazwy pol w zaleznosci od kuriera
    if raw.get("estimated_days"):
        eta = f"{raw['estimated_days']} business day(s)"
    else:
        eta = raw.get("eta") or "2-5 days"

    return {
        "courier_id": raw.get("courier_id") or raw.get("id") or "",
        "courier_name": raw.get("courier_name") or raw.get("name") or "Courier",
        "service_code": raw.get("service_code") or raw.get("code") or "",
        "delivery_fee": float(raw.get("total") or raw.get("fee") or raw.get("amount") or 0),
        "eta": eta,
        "logo": raw.get("courier_logo") or raw.get("logo") or "",
    }


def estimate_weight(items: List[Dict[str, Any]]) -> float:
    total = sum(
        float(i.get("weight") or DEFAULT_ITEM_WEIGHT) * int(i.get("quantity") or 1)
        for i in items
    )
    return max(total, MIN_PACKAGE_WEIGHT)


def format_delivery_fee(fee) -> str:
    if not fee:
        return "Free"
    return format_naira(fee)


def get_pickup_info() -> Dict[str, Any]:
    return {
        "courier_name": "Store Pickup",
        "delivery_fee": 0,
        "eta": "Ready in 1-2 hours",
        "address": STORE_ADDRESS["address"],
        "city": STORE_ADDRESS["city"],
        "state": STORE_ADDRESS["state"],
    }


class ShipbubbleClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = 15,
    ):
        self.base_url = (base_url or settings.SHIPBUBBLE_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.SHIPBUBBLE_API_KEY
        self.session = session or requests.Session()
        self.timeout = timeout

    def call(self, path: str, body: Dict[str, Any] | None = None, method: str = "POST") -> Tuple[bool, Dict[str, Any]]:
        """Zwraca (ok, data). Nie rzuca dla statusow HTTP, tylko dla bledow sieci."""
        url = f"{self.base_url}{path}"
        logger.info(f"Shipbubble {method} {url}")

        resp = self.session.request(
            method,
            url,
            data=json.dumps(body) if body is not None else None,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )

        try:
            data = resp.json()
        except ValueError:
            data = {"message": resp.text}

        if not resp.ok:
            logger.error(f"Shipbubble error {resp.status_code}: {data}")
        return resp.ok, data if isinstance(data, dict) else {"data": data}


class ShippingService:
    """
    Stawki kurierow z shipbubble, a gdy ich nie ma - stala tabela per region.
    get_rates nigdy nie rzuca, checkout nie moze stanac przez awarie kuriera.
    """

    def __init__(self, client: ShipbubbleClient | None = None):
        self.client = client or ShipbubbleClient()

    @staticmethod
    def _recipient(address: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": address.get("full_name") or "Customer",
            "email": address.get("email") or "",
            "phone": address.get("phone") or "",
            "address": address.get("street") or "",
            "city": address.get("city") or "",
            "state": address.get("state") or "",
            "country": "NG",
        }

    def get_rates(
        self,
        recipient_address: Dict[str, Any],
        items: List[Dict[str, Any]] | None = None,
        total_weight: float | None = MIN_PACKAGE_WEIGHT,
    ) -> Dict[str, Any]:
        state = (recipient_address or {}).get("state") or ""

        try:
            return self._live_rates(recipient_address or {}, items or [], total_weight)
        except Exception as e:
            logger.error(f"get_rates failed, using flat rates for '{state}': {e}")
            return {"rates": flat_rates(state), "source": SOURCE_FALLBACK, "error": str(e)}

    def _live_rates(self, address, items, total_weight) -> Dict[str, Any]:
        state = address.get("state") or ""
        body = {
            "sender": STORE_ADDRESS,
            "recipient": self._recipient(address),
            "package": {
                "weight": total_weight or MIN_PACKAGE_WEIGHT,
                **PACKAGE_DIMENSIONS,
                "items": [
                    {
                        "name": i.get("name") or "Item",
                        "quantity": i.get("quantity") or 1,
                        "weight": i.get("weight") or DEFAULT_ITEM_WEIGHT,
                    }
                    for i in items
                ],
            },
        }

        try:
            ok, data = self.client.call("/shipping/fetch-rates", body)
        except RequestException as e:
            logger.warning(f"Shipbubble unreachable: {e}")
            ok, data = False, {}

        raw_rates = (data.get("data") or data.get("rates") or []) if ok else []
        if not isinstance(raw_rates, list) or not raw_rates:
            logger.info(f"No live rates for '{state}', using flat rates")
            return {"rates": flat_rates(state), "source": SOURCE_FALLBACK}

        return {"rates": [_map_rate(r) for r in raw_rates], "source": SOURCE_LIVE}

    def get_cheapest_rate(self, recipient_address, items=None, total_weight=MIN_PACKAGE_WEIGHT):
        rates = self.get_rates(recipient_address, items, total_weight)["rates"]
        if not rates:
            return None
        return min(rates, key=lambda r: r["delivery_fee"])

    def validate_address(self, address: Dict[str, Any]) -> Dict[str, Any]:
        try:
            ok, data = self.client.call(
                "/shipping/address/validate",
                {
                    "address": address.get("street") or "",
                    "city": address.get("city") or "",
                    "state": address.get("state") or "",
                    "country": "NG",
                },
            )
        except RequestException as e:
            logger.error(f"validate_address failed: {e}")
            return {"valid": False, "error": str(e)}

        if not ok:
            return {"valid": False, "error": data.get("message") or "Address validation failed"}
        return {"valid": True, "data": data}

    def book_shipment(self, order: Dict[str, Any]) -> Dict[str, Any]:
        """Rezerwacja przesylki przez admina po potwierdzeniu zamowienia."""
        items = order.get("items")
        if isinstance(items, str):
            try:
                items = json.loads(items)
            except ValueError:
                items = []
        items = items or []

        weight = max(MIN_PACKAGE_WEIGHT, sum(int(i.get("quantity") or 1) * DEFAULT_ITEM_WEIGHT for i in items))
        body = {
            "sender": STORE_ADDRESS,
            "recipient": {
                "name": order.get("customer_name") or "Customer",
                "email": order.get("customer_email") or "",
                "phone": order.get("customer_phone") or "",
                "address": order.get("delivery_street") or "",
                "city": order.get("delivery_city") or "",
                "state": order.get("delivery_state") or "",
                "country": "NG",
            },
            "package": {
                "weight": weight,
                **PACKAGE_DIMENSIONS,
                "items": [
                    {
                        "name": i.get("name") or "Item",
                        "quantity": i.get("quantity") or 1,
                        "weight": DEFAULT_ITEM_WEIGHT,
                    }
                    for i in items
                ],
            },
        }
        if order.get("shipbubble_service_code"):
            body["service_code"] = order["shipbubble_service_code"]

        try:
            ok, data = self.client.call("/shipping/shipments", body)
        except RequestException as e:
            logger.error(f"book_shipment failed for {order.get('order_number')}: {e}")
            ok, data = False, {}

        shipment = data.get("data")
        if not ok or not isinstance(shipment, dict):
            return {
                "ok": False,
                "error": data.get("message") or "Shipbubble could not create shipment - book manually",
            }

        return {
            "ok": True,
            "tracking_id": shipment.get("tracking_id") or shipment.get("id") or "",
            "courier_name": shipment.get("courier_name") or shipment.get("courier") or "",
            "eta": shipment.get("eta") or "2-5 business days",
            "label_url": shipment.get("label_url") or shipment.get("waybill_url") or "",
        }

    def track_shipment(self, tracking_id: str) -> Dict[str, Any] | None:
        try:
            ok, data = self.client.call(f"/shipping/shipment/track/{tracking_id}", method="GET")
        except RequestException as e:
            logger.error(f"track_shipment failed for {tracking_id}: {e}")
            return None

        if not ok:
            return None

        info = data.get("data") or {}
        return {
            "status": info.get("status") or data.get("status"),
            "location": info.get("location") or "",
            "history": info.get("history") or [],
            "eta": info.get("eta") or "",
        }
