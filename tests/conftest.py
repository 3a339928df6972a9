"""
Shared pytest fixtures: in-memory stand-ins for Redis, OpenSearch and Bedrock.
"""

import io
import json
from collections import Counter
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from companion_memory.services.memory_manager import MemoryManager
from companion_memory.utils.bedrock_embed import BedrockEmbed
from companion_memory.utils.config import AppConfig, BedrockEmbedConfig, MemoryConfig, OpenSearchConfig, RedisConfig
from companion_memory.utils.opensearch_client import OpenSearchClient
from companion_memory.utils.redis_client import RedisClient


class FakeAsyncRedis:
    """Implements the sorted-set subset of redis.asyncio.Redis used by RedisClient."""

    def __init__(self):
        self.data: Dict[str, Dict[str, float]] = {}
        self.calls = Counter()
        self.closed = False

    async def zadd(self, name, mapping):
        self.calls['zadd'] += 1
        zset = self.data.setdefault(name, {})
        added = sum(1 for member in mapping if member not in zset)
        zset.update({member: float(score) for member, score in mapping.items()})
        return added

    async def zrange(self, name, start, end, byscore=False):
        self.calls['zrange'] += 1
        assert byscore
        items = sorted(self.data.get(name, {}).items(), key=lambda kv: (kv[1], kv[0]))
        return [member for member, score in items if float(start) <= score <= float(end)]

    async def exists(self, *names):
        self.calls['exists'] += 1
        return sum(1 for name in names if self.data.get(name))

    async def zcard(self, name):
        self.calls['zcard'] += 1
        return len(self.data.get(name, {}))

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


def bedrock_response(embedding):
    return {'body': io.BytesIO(json.dumps({'embedding': embedding}).encode())}


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(environment='test',
                     log_level='DEBUG',
                     redis=RedisConfig(url='redis://localhost:6379/0', token=None),
                     bedrock_embed=BedrockEmbedConfig(region='us-east-1',
                                                      model_id='amazon.titan-embed-text-v2:0',
                                                      dimension=4,
                                                      retry_attempts=2,
                                                      retry_delay=0.0),
                     opensearch=OpenSearchConfig(endpoint='https://search.example.com',
                                                 port=443,
                                                 region='us-east-1',
                                                 service='aoss',
                                                 index_name='companions',
                                                 vector_field='vector_field',
                                                 text_field='text',
                                                 scope_field='metadata.fileName'),
                     memory=MemoryConfig(history_window=30, search_top_k=3, seed_delimiter='\n'))


@pytest.fixture
def fake_redis() -> FakeAsyncRedis:
    return FakeAsyncRedis()


@pytest.fixture
def redis_client(app_config, fake_redis) -> RedisClient:
    return RedisClient(app_config.redis, client=fake_redis)


@pytest.fixture
def raw_opensearch() -> MagicMock:
    client = MagicMock()
    client.search = AsyncMock(return_value={'hits': {'hits': []}})
    client.indices.exists = AsyncMock(return_value=True)
    client.close = AsyncMock()
    return client


@pytest.fixture
def opensearch_client(app_config, raw_opensearch) -> OpenSearchClient:
    return OpenSearchClient(app_config.opensearch, client=raw_opensearch)


@pytest.fixture
def raw_bedrock() -> MagicMock:
    client = MagicMock()
    client.invoke_model.side_effect = lambda **kwargs: bedrock_response([0.1, 0.2, 0.3, 0.4])
    return client


@pytest.fixture
def embed_client(app_config, raw_bedrock) -> BedrockEmbed:
    return BedrockEmbed(app_config.bedrock_embed, client=raw_bedrock)


@pytest.fixture
def manager(app_config, redis_client, opensearch_client, embed_client) -> MemoryManager:
    return MemoryManager(config=app_config, redis=redis_client, opensearch=opensearch_client, embed=embed_client)
