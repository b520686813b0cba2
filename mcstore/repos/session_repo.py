# mcstore/repos/session_repo.py
from sqlalchemy.orm import Session

from mcstore.data.models.session import LocalSessionModel


class SessionRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, uid: str) -> LocalSessionModel | None:
        return self.db.get(LocalSessionModel, uid)

    def save_session(self, record: LocalSessionModel) -> LocalSessionModel:
        merged = self.db.merge(record)
        self.db.commit()
        self.db.refresh(merged)
        return merged

    def delete_session(self, uid: str) -> bool:
        record = self.get_session(uid)
        if not record:
            return False
        self.db.delete(record)
        self.db.commit()
        return True
