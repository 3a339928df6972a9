"""
Redis client wrapper for sorted-set backed chat history.
"""

from typing import Any, Dict, List, Optional, Union

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import RedisConfig
from .logging_config import get_logger

logger = get_logger(__name__)

Score = Union[int, float, str]


class HistoryStoreError(Exception):
    """Custom exception for Redis history store errors."""
    pass


class RedisClient:
    """Async Redis client exposing the sorted-set commands the history store needs."""

    def __init__(self, config: RedisConfig, client: Optional[Any] = None):
        """
        Initialize Redis client.

        Args:
            config: RedisConfig instance with connection parameters
            client: Pre-built redis.asyncio client (tests inject a fake here)
        """
        self.config = config
        if client is None:
            client = Redis.from_url(config.url, password=config.token, decode_responses=True)
        self.client = client

        logger.info(f'Initialized Redis client for {config.url.split("@")[-1]}')

    async def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        """
        Add members with scores to a sorted set.

        Args:
            key: Sorted set key
            mapping: member -> score

        Returns:
            Number of newly added members as reported by Redis

        Raises:
            HistoryStoreError: If the command fails
        """
        try:
            return await self.client.zadd(key, mapping)
        except RedisError as e:
            logger.error(f'Error writing to {key}: {e}')
            raise HistoryStoreError(f'ZADD failed: {e}') from e

    async def zrange_by_score(self, key: str, min_score: Score, max_score: Score) -> List[str]:
        """
        Read members of a sorted set whose score lies in [min_score, max_score], ascending.

        Args:
            key: Sorted set key
            min_score: Lower score bound
            max_score: Upper score bound

        Returns:
            Members ordered by score, empty if the key does not exist

        Raises:
            HistoryStoreError: If the command fails
        """
        try:
            return list(await self.client.zrange(key, min_score, max_score, byscore=True))
        except RedisError as e:
            logger.error(f'Error reading {key}: {e}')
            raise HistoryStoreError(f'ZRANGE failed: {e}') from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.client.exists(key))
        except RedisError as e:
            logger.error(f'Error checking existence of {key}: {e}')
            raise HistoryStoreError(f'EXISTS failed: {e}') from e

    async def zcard(self, key: str) -> int:
        try:
            return int(await self.client.zcard(key))
        except RedisError as e:
            logger.error(f'Error counting {key}: {e}')
            raise HistoryStoreError(f'ZCARD failed: {e}') from e

    async def health_check(self) -> bool:
        """
        Perform a health check on the Redis service.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.error(f'Redis health check failed: {e}')
            return False

    async def close(self) -> None:
        await self.client.aclose()
