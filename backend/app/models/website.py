"""Website model for generated portfolio sites."""
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint

from app.database import Base
from app.models.user import utc_now


class Website(Base):
    """Generated portfolio website."""
    __tablename__ = "websites"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, ForeignKey("users.identity_id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    html = Column(Text, nullable=False)
    thumbnail = Column(Text, nullable=True)  # data:image/jpeg;base64,...
    published = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    # Authoritative duplicate-name guard
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_websites_owner_name"),
    )
