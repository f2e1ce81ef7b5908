"""Per-identity lock so only one website generation runs at a time."""
import secrets
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import WatchError

from app.utils.logger import logger


def _generation_lock_key(identity_id: str) -> str:
    """Generate Redis key for the generation lock."""
    return f"generation_lock:{identity_id}"


async def acquire_generation_lock(client: redis.Redis, identity_id: str, ttl_seconds: int = 120) -> Optional[str]:
    """
    Acquire the generation lock for an identity.

    Args:
        client: Redis client
        identity_id: LinkedIn subject id
        ttl_seconds: Lock TTL, so a crashed request cannot hold it forever

    Returns:
        Owner token to pass to release_generation_lock, or None if already locked
    """
    token = secrets.token_hex(16)
    # SET with NX (only if not exists) and EX (expiration)
    result = await client.set(_generation_lock_key(identity_id), token, ex=ttl_seconds, nx=True)
    return token if result else None


async def release_generation_lock(client: redis.Redis, identity_id: str, token: str) -> bool:
    """
    Release the generation lock if it is still held with this token.

    A lock that expired and was taken by another request is left alone.

    Returns:
        True if this token's lock was deleted, False otherwise
    """
    key = _generation_lock_key(identity_id)
    try:
        async with client.pipeline(transaction=True) as pipe:
            await pipe.watch(key)
            current = await pipe.get(key)
            if isinstance(current, bytes):
                current = current.decode()
            if current != token:
                logger.warning(f"[GENERATE] Generation lock for {identity_id} expired before release")
                return False
            pipe.multi()
            pipe.delete(key)
            await pipe.execute()
            return True
    except WatchError:
        logger.warning(f"[GENERATE] Generation lock for {identity_id} changed during release")
        return False
    except Exception as e:
        logger.error(f"Failed to release generation lock for {identity_id}: {e}", exc_info=True)
        return False
