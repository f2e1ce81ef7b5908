"""User model for LinkedIn identities."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON

from app.database import Base


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class User(Base):
    """A LinkedIn member who has signed in at least once."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    identity_id = Column(String, unique=True, nullable=False, index=True)  # LinkedIn subject id
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    # Denormalized forward list; websites.owner_id is authoritative
    website_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
