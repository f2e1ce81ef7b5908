"""Schemas for website management."""
from typing import List, Optional

from pydantic import BaseModel, Field


class GenerateWebsiteRequest(BaseModel):
    """Request schema for /user/websites/generate endpoint."""
    name: Optional[str] = Field(None, description="Website name; generated when omitted")


class GenerateWebsiteResponse(BaseModel):
    """Response schema for /user/websites/generate endpoint."""
    websiteId: str
    websiteName: str
    warnings: List[str] = []


class RenameWebsiteRequest(BaseModel):
    """Request schema for PUT /user/websites/{website_id}."""
    newName: str = Field(..., description="New website name")


class WebsiteListItem(BaseModel):
    """Website list item response."""
    websiteId: str
    websiteName: str
    thumbnail: Optional[str] = None
    published: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "WebsiteListItem":
        """Convert SQLAlchemy model to response model."""
        return cls(
            websiteId=obj.id,
            websiteName=obj.name,
            thumbnail=obj.thumbnail,
            published=obj.published,
            createdAt=obj.created_at.isoformat() if obj.created_at else None,
            updatedAt=obj.updated_at.isoformat() if obj.updated_at else None,
        )


class RenameWebsiteResponse(BaseModel):
    success: bool
    website: WebsiteListItem


class PublishResponse(BaseModel):
    success: bool
    published: bool
    publicUrl: Optional[str] = None


class DeleteAllResponse(BaseModel):
    success: bool
    deletedCount: int
