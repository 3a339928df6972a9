"""
Memory Manager: single entry point over short-term history and long-term semantic memory.
"""

import asyncio
from typing import Any, List, Mapping, Optional, Union

from ..models.core import CompanionKey, InvalidCompanionKeyError, SemanticDocument
from ..utils.bedrock_embed import BedrockEmbed
from ..utils.config import AppConfig, ConfigurationError, load_config
from ..utils.key_utils import derive_history_key
from ..utils.logging_config import get_logger
from ..utils.opensearch_client import OpenSearchClient, OpenSearchError
from ..utils.redis_client import RedisClient
from .history_store import ChatHistoryStore
from .semantic_retriever import SemanticRetriever

logger = get_logger(__name__)

KeyLike = Union[CompanionKey, Mapping[str, Any], None]


class MemoryManager:
    """Per-conversation memory for companion agents.

    Construction connects the Redis and OpenSearch clients and fails fast on missing
    configuration. Use get_memory_manager() to obtain the initialized process-wide instance.
    """

    def __init__(self,
                 config: Optional[AppConfig] = None,
                 redis: Optional[RedisClient] = None,
                 opensearch: Optional[OpenSearchClient] = None,
                 embed: Optional[BedrockEmbed] = None):
        """Initialize the memory manager.

        Args:
            config: Application configuration, loaded from the environment if None
            redis: Redis client override
            opensearch: OpenSearch client override
            embed: Bedrock embedding client override

        Raises:
            ConfigurationError: If required settings or credentials are missing
        """
        if config is None:
            config = load_config()
        self.config = config

        self.redis = redis or RedisClient(config.redis)
        self.opensearch = opensearch or OpenSearchClient(config.opensearch)
        self.embed = embed or BedrockEmbed(config.bedrock_embed)

        self.history = ChatHistoryStore(self.redis, history_window=config.memory.history_window)
        self.retriever = SemanticRetriever(self.opensearch, self.embed, top_k=config.memory.search_top_k)
        self._initialized = False

        logger.info('Initialized MemoryManager')

    async def initialize(self) -> None:
        """Verify the configured vector index is usable. Safe to call more than once.

        Raises:
            ConfigurationError: If the configured index does not exist
        """
        if self._initialized:
            return

        index_name = self.opensearch.index_name
        try:
            if not await self.opensearch.index_exists():
                raise ConfigurationError(f'OpenSearch index {index_name} does not exist')
            logger.info(f'OpenSearch index {index_name} is available')
        except OpenSearchError as e:
            logger.warning(f'Could not verify OpenSearch index {index_name}, semantic search may return nothing: {e}')

        self._initialized = True

    @classmethod
    async def get_instance(cls) -> 'MemoryManager':
        return await get_memory_manager()

    def _resolve_key(self, companion_key: KeyLike) -> Optional[str]:
        if isinstance(companion_key, CompanionKey):
            return derive_history_key(companion_key)
        if companion_key is None:
            logger.warning('Companion key set incorrectly: no key supplied')
            return None
        try:
            return derive_history_key(CompanionKey.from_mapping(companion_key))
        except (InvalidCompanionKeyError, AttributeError) as e:
            logger.warning(f'Companion key set incorrectly: {e}')
            return None

    async def write_to_history(self, text: str, companion_key: KeyLike) -> Optional[int]:
        """Append a line to the conversation's short-term history.

        Args:
            text: Line of conversation, e.g. "User: hi"
            companion_key: Conversation identifier

        Returns:
            Redis acknowledgement, or None if the key is malformed
        """
        key = self._resolve_key(companion_key)
        if key is None:
            return None
        return await self.history.append(key, text)

    async def read_latest_history(self, companion_key: KeyLike) -> str:
        """Return the latest history window, oldest line first, newline-joined.

        Returns an empty string for unknown conversations and malformed keys.
        """
        key = self._resolve_key(companion_key)
        if key is None:
            return ''
        return await self.history.read_recent(key)

    async def seed_chat_history(self, seed_content: str, delimiter: Optional[str] = None, companion_key: KeyLike = None) -> bool:
        """Seed a conversation once from static content.

        Args:
            seed_content: Lines to preload
            delimiter: Line separator (defaults to the configured seed delimiter)
            companion_key: Conversation identifier

        Returns:
            True if seeded, False if history already existed or the key is malformed
        """
        key = self._resolve_key(companion_key)
        if key is None:
            return False
        if delimiter is None:
            delimiter = self.config.memory.seed_delimiter
        return await self.history.seed_if_absent(key, seed_content, delimiter)

    async def count_history(self, companion_key: KeyLike) -> int:
        key = self._resolve_key(companion_key)
        if key is None:
            return 0
        return await self.history.count(key)

    async def vector_search(self, recent_chat_history: str, companion_file_name: str, top_k: Optional[int] = None) -> List[SemanticDocument]:
        """Return fragments of the companion's corpus similar to the recent chat.

        Never raises; failures yield an empty list.
        """
        result = await self.retriever.search(recent_chat_history, companion_file_name, top_k=top_k)
        return result.documents

    async def close(self) -> None:
        await self.redis.close()
        await self.opensearch.close()


_instance: Optional[MemoryManager] = None
_instance_lock = asyncio.Lock()


async def get_memory_manager() -> MemoryManager:
    """Return the process-wide MemoryManager, creating and initializing it on first use.

    Concurrent first callers wait on a lock so construction and initialization run once.
    """
    global _instance
    if _instance is not None:
        return _instance

    async with _instance_lock:
        if _instance is None:
            manager = MemoryManager()
            await manager.initialize()
            _instance = manager
    return _instance


async def reset_memory_manager() -> None:
    """Drop the process-wide instance and close its connections."""
    global _instance, _instance_lock
    manager, _instance = _instance, None
    _instance_lock = asyncio.Lock()
    if manager is not None:
        await manager.close()
