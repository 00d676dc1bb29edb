"""
Async Redis client lifecycle for RedisConversationRepository.

The container opens one client per app (only when REDIS_URL is set) and
closes it when the container shuts down.
"""

import logging
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def _redacted(url: str) -> str:
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@")
    return urlunsplit(parts._replace(netloc=netloc))


async def create_redis_client(url: str, timeout: float = 5.0) -> Redis:
    """
    Connect and ping.

    Snapshots are JSON text, so responses are decoded to str. A failed ping
    closes the pool and re-raises; the app refuses to start without its store.
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        await client.ping()
    except RedisError:
        logger.error(f"[Redis] Cannot reach {_redacted(url)}")
        await client.aclose()
        raise

    logger.info(f"[Redis] Connected to {_redacted(url)}")
    return client


async def close_redis_client(client: Redis) -> None:
    await client.aclose()
    logger.info("[Redis] Connection closed")
