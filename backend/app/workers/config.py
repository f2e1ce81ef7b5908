"""ARQ worker configuration."""
from arq.cron import cron

from app.config import get_settings
from app.utils.logger import logger
from app.workers.redis_config import parse_redis_url

# Import the actual task functions
from app.workers.tasks import reconcile_user_websites, cleanup_expired_tokens


async def startup(ctx):
    """Worker startup hook."""
    logger.info("ARQ worker starting up...")
    ctx["startup_complete"] = True


async def shutdown(ctx):
    """Worker shutdown hook."""
    logger.info("ARQ worker shutting down...")


class WorkerSettings:
    """ARQ worker settings."""

    # Use actual function references, not strings
    functions = [
        reconcile_user_websites,
        cleanup_expired_tokens,
    ]

    cron_jobs = [
        # Run token cleanup at the top of every hour
        cron(cleanup_expired_tokens, minute=0),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = parse_redis_url(get_settings().redis_url)

    # Job configuration
    max_jobs = 5
    job_timeout = 60
    keep_result = 3600  # Keep results for 1 hour
    retry_jobs = True
    max_tries = 3
