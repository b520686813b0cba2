# mcstore/services/customer_service.py
import re
from datetime import datetime, timezone
from typing import Any, Dict

from mcstore.domain.errors import NotFoundError, StoreError
from mcstore.domain.results import safe_read
from mcstore.repos.customer_repo import CustomerRepo
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)

# +234 / 234 / 0, potem 7x/8x/9x i 8 cyfr
_NG_PHONE = re.compile(r"^(\+?234|0)[789][01]\d{8}$")


def detect_input_type(identifier: str) -> str:
    cleaned = re.sub(r"\s", "", identifier or "")
    return "phone" if _NG_PHONE.match(cleaned) else "email"


class CustomerService:
    """Profil klienta w bazie. Logowanie samo w sobie robi zewnetrzny dostawca tozsamosci."""

    def __init__(self, gateway: RestGateway):
        self.repo = CustomerRepo(gateway)

    def get_customer_profile(self, uid: str) -> Dict[str, Any] | None:
        return safe_read("get_customer_profile", lambda: self.repo.get_customer(uid), None).data

    def update_customer_profile(self, uid: str, updates: Dict[str, Any]) -> bool:
        try:
            self.repo.update_customer(uid, {**updates, "updated_at": datetime.now(timezone.utc).isoformat()})
        except Exception as e:
            logger.error(f"update_customer_profile failed for {uid}: {e}")
            raise StoreError("Could not update your profile. Please try again.") from e
        return True

    def find_email_by_phone(self, phone: str) -> str:
        cleaned = re.sub(r"\s", "", phone or "")
        customer = self.repo.find_by_phone(cleaned)
        if not customer or not customer.get("email"):
            raise NotFoundError(
                "No account found with this phone number. "
                "Try logging in with your email address instead."
            )
        return customer["email"]

    def resolve_login_email(self, identifier: str) -> str:
        identifier = (identifier or "").strip()
        if detect_input_type(identifier) == "phone":
            return self.find_email_by_phone(identifier)
        return identifier
