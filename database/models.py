# database/models.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

# Important: must match Base from db_setup.py
from .db_setup import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalValue(Base):
    """One named, whole-value JSON blob in the local store."""
    __tablename__ = "local_values"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self):
        return f"<LocalValue(key={self.key}, updated_at={self.updated_at})>"
