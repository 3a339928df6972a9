"""
Configuration management for the history store, vector index and embedding service.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Raised when a required setting is missing or malformed."""
    pass


@dataclass
class RedisConfig:
    """Configuration for the Redis short-term history store."""
    url: str
    token: Optional[str]


@dataclass
class BedrockEmbedConfig:
    """Configuration for Amazon Bedrock Embed service."""
    region: str
    model_id: str
    dimension: int
    retry_attempts: int
    retry_delay: float


@dataclass
class OpenSearchConfig:
    """Configuration for OpenSearch."""
    endpoint: str
    port: int
    region: str
    service: str
    index_name: str
    vector_field: str
    text_field: str
    scope_field: str


@dataclass
class MemoryConfig:
    """Configuration for memory management."""
    history_window: int
    search_top_k: int
    seed_delimiter: str


@dataclass
class AppConfig:
    """Main application configuration."""
    environment: str
    log_level: str
    redis: RedisConfig
    bedrock_embed: BedrockEmbedConfig
    opensearch: OpenSearchConfig
    memory: MemoryConfig


def _require(name: str) -> str:
    value = os.getenv(name, '').strip()
    if not value:
        raise ConfigurationError(f'Missing required setting: {name}')
    return value


def _int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f'Setting {name} must be an integer, got {raw!r}')


def _positive_int(name: str, default: str) -> int:
    value = _int(name, default)
    if value < 1:
        raise ConfigurationError(f'Setting {name} must be at least 1, got {value}')
    return value


def _float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f'Setting {name} must be a number, got {raw!r}')


def load_config() -> AppConfig:
    """Load configuration from environment variables with defaults.

    Returns:
        Populated AppConfig

    Raises:
        ConfigurationError: If a required setting is absent or a numeric setting does not parse
    """
    environment = os.getenv('ENVIRONMENT', 'development')

    # Redis configuration
    redis_config = RedisConfig(url=_require('REDIS_URL'), token=os.getenv('REDIS_TOKEN') or None)

    # Bedrock Embed configuration
    bedrock_embed_config = BedrockEmbedConfig(region=os.getenv('BEDROCK_EMBED_AWS_REGION', 'us-east-1'),
                                              model_id=os.getenv('BEDROCK_EMBED_MODEL_ID', 'amazon.titan-embed-text-v2:0'),
                                              dimension=_int('BEDROCK_EMBED_DIMENSION', '1024'),
                                              retry_attempts=_int('BEDROCK_EMBED_RETRY_ATTEMPTS', '3'),
                                              retry_delay=_float('BEDROCK_EMBED_RETRY_DELAY', '1.0'))

    # Vector search configuration
    opensearch_config = OpenSearchConfig(endpoint=_require('OPENSEARCH_ENDPOINT'),
                                         port=_int('OPENSEARCH_PORT', '443'),
                                         region=os.getenv('OPENSEARCH_AWS_REGION', 'us-east-1'),
                                         service=os.getenv('OPENSEARCH_SERVICE', 'aoss'),
                                         index_name=_require('OPENSEARCH_INDEX'),
                                         vector_field=os.getenv('OPENSEARCH_VECTOR_FIELD', 'vector_field'),
                                         text_field=os.getenv('OPENSEARCH_TEXT_FIELD', 'text'),
                                         scope_field=os.getenv('OPENSEARCH_SCOPE_FIELD', 'metadata.fileName'))

    # Memory configuration
    memory_config = MemoryConfig(history_window=_positive_int('MEMORY_HISTORY_WINDOW', '30'),
                                 search_top_k=_positive_int('MEMORY_SEARCH_TOP_K', '3'),
                                 seed_delimiter=os.getenv('MEMORY_SEED_DELIMITER', '\n'))

    return AppConfig(environment=environment,
                     log_level=os.getenv('LOG_LEVEL', 'INFO'),
                     redis=redis_config,
                     bedrock_embed=bedrock_embed_config,
                     opensearch=opensearch_config,
                     memory=memory_config)
