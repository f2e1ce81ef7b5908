"""Pydantic schemas for request/response validation."""
from app.schemas.auth import CheckAuthResponse, ProfileSnapshot
from app.schemas.website import (
    GenerateWebsiteRequest,
    GenerateWebsiteResponse,
    RenameWebsiteRequest,
    WebsiteListItem,
)

__all__ = [
    "CheckAuthResponse",
    "ProfileSnapshot",
    "GenerateWebsiteRequest",
    "GenerateWebsiteResponse",
    "RenameWebsiteRequest",
    "WebsiteListItem",
]
