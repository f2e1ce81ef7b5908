"""Schemas for authentication state."""
from typing import Optional

from pydantic import BaseModel


class ProfileSnapshot(BaseModel):
    """Cached copy of the LinkedIn profile held in the session."""
    name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None


class CheckAuthResponse(BaseModel):
    """Response schema for /user/check-auth."""
    authenticated: bool
    userId: Optional[str] = None
    profile: Optional[ProfileSnapshot] = None


class LogoutResponse(BaseModel):
    success: bool
