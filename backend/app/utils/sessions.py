"""Server-side web sessions stored in Redis.

The browser only holds a signed, opaque session id. Session data (OAuth
state, access token, identity id and a profile snapshot) lives in Redis
under ``web_session:<sid>`` and expires after ``session_ttl_seconds``.
"""
import json
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import redis.asyncio as redis
from itsdangerous import BadSignature, URLSafeSerializer

from app.config import Settings
from app.utils.hashing import generate_session_id
from app.utils.logger import logger


@asynccontextmanager
async def get_redis_client(redis_url: str):
    """Get async Redis client with proper cleanup."""
    client = redis.from_url(redis_url, decode_responses=True)
    try:
        yield client
    finally:
        await client.aclose()


def _session_key(session_id: str) -> str:
    """Generate Redis key for session data."""
    return f"web_session:{session_id}"


class SessionStore:
    """Loads, saves and destroys sessions for one Redis client."""

    def __init__(self, client: redis.Redis, settings: Settings):
        self.client = client
        self.ttl = settings.session_ttl_seconds
        self._signer = URLSafeSerializer(settings.session_secret, salt="web-session")

    def sign(self, session_id: str) -> str:
        """Produce the cookie value for a session id."""
        return self._signer.dumps(session_id)

    def unsign(self, cookie_value: Optional[str]) -> Optional[str]:
        """Recover a session id from a cookie, or None if it was tampered with."""
        if not cookie_value:
            return None
        try:
            return self._signer.loads(cookie_value)
        except BadSignature:
            logger.warning("[SESSION] Rejected session cookie with bad signature")
            return None

    def new_session_id(self) -> str:
        return generate_session_id()

    async def load(self, session_id: Optional[str]) -> Dict[str, Any]:
        """
        Retrieve session data from Redis.

        Args:
            session_id: Opaque session id (unsigned)

        Returns:
            Session data, empty if the session is unknown or expired
        """
        if not session_id:
            return {}
        data = await self.client.get(_session_key(session_id))
        if not data:
            return {}
        return json.loads(data)

    async def save(self, session_id: str, data: Dict[str, Any]) -> None:
        """Store session data and refresh its TTL."""
        await self.client.setex(_session_key(session_id), self.ttl, json.dumps(data))
        logger.debug(f"[SESSION] Saved session {session_id[:8]}...")

    async def destroy(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        await self.client.delete(_session_key(session_id))
        logger.debug(f"[SESSION] Destroyed session {session_id[:8]}...")
