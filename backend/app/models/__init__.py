"""Models package."""
from app.models.user import User
from app.models.token import Token
from app.models.website import Website

__all__ = ["User", "Token", "Website"]
