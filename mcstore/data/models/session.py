from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from mcstore.data.database import Base


class LocalSessionModel(Base):
    """Lokalna kopia sesji od dostawcy tozsamosci, do szybkiego sprawdzania na stronach."""

    __tablename__ = "sessions"

    uid = Column(String, primary_key=True)
    full_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    login_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    saved_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
