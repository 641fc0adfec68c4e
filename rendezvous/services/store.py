from typing import Protocol

import redis.asyncio as redis
from loguru import logger

from rendezvous.core.config import settings
from rendezvous.core.security import redact_token


class KeyValueStore(Protocol):
    """Persistence port: one serialized record per id, grouped by collection."""

    async def get(self, collection: str, record_id: str) -> str | None: ...

    async def get_all(self, collection: str) -> dict[str, str]: ...

    async def set(self, collection: str, record_id: str, value: str) -> bool: ...

    async def delete(self, collection: str, record_id: str) -> bool: ...


class RedisStore:
    """Redis-backed KeyValueStore. Each collection is one hash, keyed by record id.

    Failures are logged and re-raised; retrying is the caller's decision.
    """

    def __init__(self, client: redis.Redis | None = None, key_prefix: str | None = None) -> None:
        self._client = client
        self.key_prefix = settings.REDIS_KEY_PREFIX if key_prefix is None else key_prefix
        if client is None and not settings.REDIS_URL:
            logger.warning("REDIS_URL is not set. Store operations will fail until configured.")

    async def get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for RedisStore")
            self._client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                health_check_interval=30,
                socket_keepalive=True,
            )
        return self._client

    def _format_key(self, collection: str) -> str:
        return f"{self.key_prefix}{collection}"

    async def get(self, collection: str, record_id: str) -> str | None:
        """Fetch one serialized record, or None if the id is unknown."""
        try:
            client = await self.get_client()
            return await client.hget(self._format_key(collection), record_id)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to get {collection}/{redact_token(record_id)} from Redis: {exc}")
            raise

    async def get_all(self, collection: str) -> dict[str, str]:
        """Fetch every record of a collection as a mapping of id to serialized record."""
        try:
            client = await self.get_client()
            return await client.hgetall(self._format_key(collection))
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to list {collection} from Redis: {exc}")
            raise

    async def set(self, collection: str, record_id: str, value: str) -> bool:
        """Store a serialized record.

        Returns:
            True once Redis acknowledged the write (new or overwritten field)
        """
        try:
            client = await self.get_client()
            await client.hset(self._format_key(collection), record_id, value)
            return True
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to set {collection}/{redact_token(record_id)} in Redis: {exc}")
            raise

    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was removed, False if there was nothing to remove
        """
        try:
            client = await self.get_client()
            result = await client.hdel(self._format_key(collection), record_id)
            return bool(result)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to delete {collection}/{redact_token(record_id)} from Redis: {exc}")
            raise

    async def close(self) -> None:
        """Close and disconnect the Redis client"""
        if self._client is not None:
            try:
                await self._client.aclose()
                logger.info("RedisStore client closed")
            except Exception as exc:
                logger.warning(f"Failed to close RedisStore client: {exc}")
            finally:
                self._client = None
