"""Redis connection settings shared by the API and the ARQ worker."""
from urllib.parse import unquote, urlparse

from arq.connections import RedisSettings


def parse_redis_url(url: str) -> RedisSettings:
    """
    Parse a redis:// or rediss:// URL into ARQ RedisSettings.

    Args:
        url: Redis URL, optionally with credentials and a database number

    Returns:
        RedisSettings for arq.create_pool and WorkerSettings
    """
    parsed = urlparse(url)
    database = parsed.path.lstrip("/")
    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        username=unquote(parsed.username) if parsed.username else None,
        password=unquote(parsed.password) if parsed.password else None,
        database=int(database) if database.isdigit() else 0,
        ssl=parsed.scheme == "rediss",
    )
