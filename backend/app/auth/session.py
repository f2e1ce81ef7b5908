"""Session-based authentication dependencies.

``get_request_context`` loads the caller's session once per request and hands
it to handlers explicitly. The guards only inspect that context; they never
write to the session.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import redis.asyncio as redis
from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_db
from app.services.accounts import token_is_valid
from app.utils.exceptions import TokenExpiredError, UnauthorizedError
from app.utils.sessions import SessionStore, get_redis_client


async def get_redis(settings: Settings = Depends(get_settings)):
    """Dependency for getting a Redis client."""
    async with get_redis_client(settings.redis_url) as client:
        yield client


@dataclass
class RequestContext:
    """Settings plus the caller's session, scoped to one request."""
    settings: Settings
    sessions: SessionStore
    session_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def identity_id(self) -> Optional[str]:
        return self.data.get("identity_id")


@dataclass
class AuthenticatedUser:
    """Identity established by a valid session."""
    identity_id: str
    access_token: str
    profile: Dict[str, Any] = field(default_factory=dict)


async def get_request_context(
    request: Request,
    settings: Settings = Depends(get_settings),
    redis_client: redis.Redis = Depends(get_redis),
) -> RequestContext:
    """Load the session named by the signed cookie, if any."""
    sessions = SessionStore(redis_client, settings)
    session_id = sessions.unsign(request.cookies.get(settings.session_cookie_name))
    data = await sessions.load(session_id)
    return RequestContext(
        settings=settings,
        sessions=sessions,
        session_id=session_id if data else None,
        data=data,
    )


def set_session_cookie(response: Response, ctx: RequestContext, session_id: str) -> None:
    """Attach the signed session id to a response."""
    response.set_cookie(
        key=ctx.settings.session_cookie_name,
        value=ctx.sessions.sign(session_id),
        max_age=ctx.settings.session_ttl_seconds,
        httponly=True,
        secure=ctx.settings.cookie_secure,
        samesite=ctx.settings.cookie_samesite,
        path="/",
    )


def clear_session_cookie(response: Response, ctx: RequestContext) -> None:
    response.delete_cookie(
        key=ctx.settings.session_cookie_name,
        path="/",
        secure=ctx.settings.cookie_secure,
        samesite=ctx.settings.cookie_samesite,
    )


def require_session(ctx: RequestContext = Depends(get_request_context)) -> AuthenticatedUser:
    """
    Require a session holding an access token and identity.

    Raises:
        UnauthorizedError: If the session is missing or incomplete
    """
    access_token = ctx.data.get("access_token")
    identity_id = ctx.data.get("identity_id")
    if not access_token or not identity_id:
        raise UnauthorizedError()
    return AuthenticatedUser(
        identity_id=identity_id,
        access_token=access_token,
        profile=ctx.data.get("profile") or {},
    )


def require_valid_token(
    user: AuthenticatedUser = Depends(require_session),
    db: Session = Depends(get_db),
) -> AuthenticatedUser:
    """
    Require a session whose last issued provider token is unexpired.

    Raises:
        TokenExpiredError: If the token record is missing or expired
    """
    if not token_is_valid(db, user.identity_id):
        raise TokenExpiredError()
    return user
