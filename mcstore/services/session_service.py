# mcstore/services/session_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from mcstore.data.models.session import LocalSessionModel
from mcstore.domain.errors import NotFoundError, ValidationError
from mcstore.repos.session_repo import SessionRepo
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("full_name", "email", "phone", "address")


def _to_dict(record: LocalSessionModel) -> Dict[str, Any]:
    return {
        "uid": record.uid,
        "full_name": record.full_name,
        "email": record.email,
        "phone": record.phone,
        "address": record.address,
        "login_at": record.login_at,
        "saved_at": record.saved_at,
    }


class SessionService:
    """
    Lokalny rekord sesji (uid + dane profilu), kopia z dostawcy tozsamosci.
    Jeden rekord na uid, zapis nadpisuje.
    """

    def __init__(self, db: Session):
        self.repo = SessionRepo(db)

    def save_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("uid"):
            raise ValidationError("Session needs a uid.")

        now = datetime.now(timezone.utc)
        record = LocalSessionModel(
            uid=data["uid"],
            full_name=data.get("full_name") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
            login_at=data.get("login_at") or now,
            saved_at=now,
        )
        saved = self.repo.save_session(record)
        logger.info(f"Session saved for {saved.uid}")
        return _to_dict(saved)

    def get_session(self, uid: str) -> Dict[str, Any] | None:
        record = self.repo.get_session(uid)
        return _to_dict(record) if record else None

    def clear_session(self, uid: str) -> bool:
        return self.repo.delete_session(uid)

    def update_session(self, uid: str, field: str, value: Any) -> Dict[str, Any]:
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Session field '{field}' cannot be updated.")

        current = self.get_session(uid)
        if not current:
            raise NotFoundError("No active session to update.")

        current[field] = value
        return self.save_session(current)

    def is_logged_in(self, uid: str) -> bool:
        session = self.get_session(uid)
        return session is not None and session["uid"] != ""
