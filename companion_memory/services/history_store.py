"""
Short-term chat history kept as one Redis sorted set per conversation.
"""

from typing import Dict, List, Optional

from ..models.core import HistoryEntry
from ..utils.logging_config import get_logger
from ..utils.redis_client import RedisClient
from ..utils.timestamp_utils import to_millis

logger = get_logger(__name__)

DEFAULT_HISTORY_WINDOW = 30


def split_seed_content(content: str, delimiter: str = '\n') -> List[HistoryEntry]:
    """Split seed content into entries scored 0, 1, 2, ... in input order."""
    return [HistoryEntry(text=line, score=counter) for counter, line in enumerate(content.split(delimiter))]


def _to_mapping(entries: List[HistoryEntry]) -> Dict[str, float]:
    return {entry.text: entry.score for entry in entries}


class ChatHistoryStore:
    """Append-only, score-ordered log of chat lines.

    Live writes are scored with the current time in epoch milliseconds, seeded lines
    with a counter starting at 0, so reading back by score gives chronological order.
    Store errors are raised as HistoryStoreError and never swallowed here.
    """

    def __init__(self, redis: RedisClient, history_window: int = DEFAULT_HISTORY_WINDOW):
        self.redis = redis
        self.history_window = history_window

    async def append(self, key: str, text: str, score: Optional[float] = None) -> int:
        """Append one line to the history stored under key.

        Args:
            key: Derived history key
            text: Line of conversation
            score: Ordering score, defaults to the current time in milliseconds

        Returns:
            Redis acknowledgement (number of newly added members)
        """
        entry = HistoryEntry(text=text, score=to_millis() if score is None else score)
        return await self.redis.zadd(key, _to_mapping([entry]))

    async def read_recent(self, key: str) -> str:
        """Return at most history_window lines, the most recent ones, oldest first, joined by newlines.

        Returns an empty string when the key holds no history.
        """
        if self.history_window < 1:
            return ''
        lines = await self.redis.zrange_by_score(key, 0, to_millis())
        return '\n'.join(lines[-self.history_window:])

    async def seed_if_absent(self, key: str, content: str, delimiter: str = '\n') -> bool:
        """Bootstrap a conversation from static content unless it already has history.

        Lines are scored 0, 1, 2, ... in input order.

        Returns:
            True if the content was written, False if history already existed
        """
        if await self.redis.exists(key):
            logger.info(f'History already present for {key}, skipping seed')
            return False

        entries = split_seed_content(content, delimiter)
        # Concurrent seeders write identical members and scores, so the result is the same.
        await self.redis.zadd(key, _to_mapping(entries))
        logger.debug(f'Seeded {len(entries)} lines into {key}')
        return True

    async def count(self, key: str) -> int:
        return await self.redis.zcard(key)
