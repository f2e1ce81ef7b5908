"""Queue helpers for the user-link repair job."""
from arq import create_pool

from app.config import get_settings
from app.utils.logger import logger
from app.workers.redis_config import parse_redis_url


async def queue_user_link_repair(identity_id: str) -> bool:
    """
    Queue a job that rebuilds a user's website id list.

    Args:
        identity_id: LinkedIn subject id of the user to repair

    Returns:
        True if job was queued successfully, False otherwise
    """
    try:
        redis = await create_pool(parse_redis_url(get_settings().redis_url))
        await redis.enqueue_job("reconcile_user_websites", identity_id)
        await redis.aclose()
        return True
    except Exception as e:
        logger.error(f"Failed to queue user link repair for {identity_id}: {e}", exc_info=True)
        return False
