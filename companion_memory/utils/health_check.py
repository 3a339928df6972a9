"""
Health check utilities for the memory backends.
"""

from typing import TYPE_CHECKING, Any, Dict

from .logging_config import get_logger

if TYPE_CHECKING:
    from ..services.memory_manager import MemoryManager

logger = get_logger(__name__)


async def check_health(manager: 'MemoryManager') -> bool:
    """Check the health of all backends used by a memory manager.

    Returns:
        True if all components are healthy, False otherwise
    """
    health_status = await get_health_status(manager)

    # Check if all components are healthy
    all_healthy = all(status.get('healthy', False) for status in health_status.values())

    if all_healthy:
        logger.info('All memory backends are healthy')
    else:
        logger.warning('Some memory backends are unhealthy')

    return all_healthy


async def get_health_status(manager: 'MemoryManager') -> Dict[str, Any]:
    """Get detailed health status of each backend.

    Returns:
        Dictionary with health status of each component
    """
    config = manager.config
    return {
        'redis': {
            'healthy': await manager.redis.health_check(),
            'service': 'Redis',
        },
        'opensearch': {
            'healthy': await manager.opensearch.health_check(),
            'service': 'Amazon OpenSearch',
            'endpoint': config.opensearch.endpoint,
            'index': config.opensearch.index_name
        },
        'bedrock_embed': {
            'healthy': await manager.embed.health_check(),
            'service': 'Amazon Bedrock Embed',
            'model': config.bedrock_embed.model_id
        }
    }
