# mcstore/services/notification_service.py
from typing import Any, Dict, List

from mcstore.domain.results import safe_read
from mcstore.repos.notification_repo import NotificationRepo
from mcstore.services.rest_gateway import RestGateway
from mcstore.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia klienta (tabela notifs).
    Tylko odczyt i oznaczanie jako przeczytane.
    """

    def __init__(self, gateway: RestGateway):
        self.repo = NotificationRepo(gateway)

    def get_notifications(self, uid: str) -> List[Dict[str, Any]]:
        return safe_read("get_notifications", lambda: self.repo.list_for_user(uid), []).data

    def get_unread_count(self, uid: str) -> int:
        return len(safe_read("get_unread_count", lambda: self.repo.list_unread(uid), []).data)

    def mark_read(self, notif_id: Any) -> bool:
        try:
            self.repo.mark_read(notif_id)
            return True
        except Exception as e:
            logger.error(f"mark_read failed for {notif_id}: {e}")
            return False
