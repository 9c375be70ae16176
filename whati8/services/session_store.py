"""Ledger session storage"""
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis.asyncio as redis
from pydantic import ValidationError as SchemaValidationError
from redis.exceptions import RedisError

from whati8.config import get_settings
from whati8.core.exceptions import StorageError
from whati8.schemas.ledger import LedgerRecord

logger = logging.getLogger(__name__)


class BaseSessionStore(ABC):
    """Load/save of serialised ledgers, keyed by session id"""

    async def create(self, record: LedgerRecord) -> str:
        """
        Store a new ledger under a fresh session id.

        Args:
            record: Serialised ledger

        Returns:
            Session id
        """
        session_id = uuid.uuid4().hex
        await self.save(session_id, record)
        return session_id

    async def load(self, session_id: str) -> Optional[LedgerRecord]:
        """
        Load a ledger.

        Args:
            session_id: Session id

        Returns:
            Ledger record if the session exists, None otherwise
        """
        raw = await self._get(session_id)
        if raw is None:
            return None
        try:
            return LedgerRecord.model_validate_json(raw)
        except SchemaValidationError as e:
            logger.error("Corrupt ledger stored for session %s: %s", session_id, e)
            raise StorageError(f"Stored ledger for session {session_id} is unreadable") from e

    async def save(self, session_id: str, record: LedgerRecord) -> None:
        await self._set(session_id, record.model_dump_json())

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """
        Delete a ledger.

        Returns:
            True if the session existed
        """

    @abstractmethod
    async def _get(self, session_id: str) -> Optional[str]:
        pass

    @abstractmethod
    async def _set(self, session_id: str, payload: str) -> None:
        pass


class MemorySessionStore(BaseSessionStore):
    """Process-local store, for development and tests"""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def delete(self, session_id: str) -> bool:
        return self._data.pop(session_id, None) is not None

    async def _get(self, session_id: str) -> Optional[str]:
        return self._data.get(session_id)

    async def _set(self, session_id: str, payload: str) -> None:
        self._data[session_id] = payload


class RedisSessionStore(BaseSessionStore):
    """Redis-backed store; ledgers expire after the configured TTL"""

    key_prefix = "ledger"

    def __init__(self, redis_url: str, ttl: int):
        self.redis_url = redis_url
        self.ttl = ttl
        self._redis_client: Optional[redis.Redis] = None

    async def get_redis_client(self) -> redis.Redis:
        """
        Get or create the Redis client.

        Returns:
            Redis client instance
        """
        if self._redis_client is None:
            self._redis_client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
        return self._redis_client

    async def close(self) -> None:
        """Close Redis connection"""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None

    async def health_check(self) -> bool:
        """
        Check if Redis connection is healthy.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            client = await self.get_redis_client()
            await client.ping()
            return True
        except RedisError:
            return False

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}:{session_id}"

    async def delete(self, session_id: str) -> bool:
        try:
            client = await self.get_redis_client()
            return bool(await client.delete(self._key(session_id)))
        except RedisError as e:
            logger.error("Session delete error for '%s': %s", session_id, e)
            raise StorageError() from e

    async def _get(self, session_id: str) -> Optional[str]:
        try:
            client = await self.get_redis_client()
            return await client.get(self._key(session_id))
        except RedisError as e:
            logger.error("Session load error for '%s': %s", session_id, e)
            raise StorageError() from e

    async def _set(self, session_id: str, payload: str) -> None:
        try:
            client = await self.get_redis_client()
            await client.setex(self._key(session_id), self.ttl, payload)
        except RedisError as e:
            logger.error("Session save error for '%s': %s", session_id, e)
            raise StorageError() from e


_store: Optional[BaseSessionStore] = None


def get_session_store() -> BaseSessionStore:
    """Get the session store singleton for the configured backend"""
    global _store
    if _store is None:
        settings = get_settings()
        if settings.session_backend == "redis":
            _store = RedisSessionStore(settings.redis_url, settings.session_ttl_seconds)
        else:
            _store = MemorySessionStore()
        logger.info("Using %s session store", settings.session_backend)
    return _store
