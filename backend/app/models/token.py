"""Token model for the last issued LinkedIn access token."""
import uuid

from sqlalchemy import Column, String, DateTime

from app.database import Base
from app.models.user import utc_now


class Token(Base):
    """Last access token issued to an identity. Only a hash of the token is kept."""
    __tablename__ = "tokens"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    identity_id = Column(String, unique=True, nullable=False, index=True)
    token_hash = Column(String, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
