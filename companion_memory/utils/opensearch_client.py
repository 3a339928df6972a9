"""
OpenSearch client wrapper for vector similarity search.
"""

from typing import Any, Dict, List, Optional

import boto3
from opensearchpy import AsyncHttpConnection, AsyncOpenSearch, AWSV4SignerAsyncAuth
from opensearchpy.exceptions import OpenSearchException

from ..models.core import SemanticDocument
from .config import ConfigurationError, OpenSearchConfig
from .logging_config import get_logger

logger = get_logger(__name__)


class OpenSearchError(Exception):
    """Custom exception for OpenSearch errors."""
    pass


class OpenSearchClient:
    """Async OpenSearch client with AWS authentication and error handling.

    Only queries the index; documents are ingested and indexed elsewhere.
    """

    def __init__(self, config: OpenSearchConfig, client: Optional[Any] = None):
        """
        Initialize OpenSearch client.

        Args:
            config: OpenSearchConfig instance with connection parameters
            client: Pre-built AsyncOpenSearch client (tests inject a fake here)

        Raises:
            ConfigurationError: If no AWS credentials are available for request signing
        """
        self.config = config

        if client is None:
            # Get AWS credentials and create auth
            credentials = boto3.Session().get_credentials()
            if credentials is None:
                raise ConfigurationError('No AWS credentials found for OpenSearch request signing')
            auth = AWSV4SignerAsyncAuth(credentials, config.region, config.service)

            # Parse endpoint to get host
            endpoint = config.endpoint
            if '://' in endpoint:
                # Remove protocol if present
                endpoint = endpoint.split('://', 1)[1]

            client = AsyncOpenSearch(hosts=[{
                'host': endpoint,
                'port': config.port
            }],
                                     http_auth=auth,
                                     use_ssl=True,
                                     verify_certs=True,
                                     connection_class=AsyncHttpConnection)
        self.client = client

        logger.info(f'Initialized OpenSearch client for endpoint: {config.endpoint}')

    @property
    def index_name(self) -> str:
        return self.config.index_name

    async def index_exists(self, index_name: Optional[str] = None) -> bool:
        """
        Check whether an index exists.

        Args:
            index_name: Name of the index (uses config default if None)

        Returns:
            True if the index exists

        Raises:
            OpenSearchError: If the service cannot be reached
        """
        index_name = index_name or self.config.index_name
        try:
            return bool(await self.client.indices.exists(index=index_name))
        except OpenSearchException as e:
            logger.error(f'Error checking index {index_name}: {e}')
            raise OpenSearchError(f'Failed to check index: {e}') from e
        except Exception as e:
            logger.error(f'Unexpected error checking index {index_name}: {e}')
            raise OpenSearchError(f'Unexpected error checking index: {e}') from e

    def _to_document(self, hit: Dict[str, Any]) -> SemanticDocument:
        source = hit.get('_source', {})
        metadata = source.get('metadata')
        if not isinstance(metadata, dict):
            metadata = {k: v for k, v in source.items() if k not in (self.config.text_field, self.config.vector_field)}
        return SemanticDocument(id=hit.get('_id', ''),
                                page_content=source.get(self.config.text_field, ''),
                                metadata=metadata,
                                score=hit.get('_score', 0.0))

    async def vector_search(self,
                            query_vector: List[float],
                            scope_tag: str,
                            top_k: int = 3,
                            index_name: Optional[str] = None) -> List[SemanticDocument]:
        """
        Perform vector similarity search restricted to one document scope.

        Args:
            query_vector: Query vector for similarity search
            scope_tag: Value the scope field must equal (the companion's source file name)
            top_k: Number of results to return (default 3)
            index_name: Name of the index (uses config default if None)

        Returns:
            Documents in the order ranked by the index

        Raises:
            OpenSearchError: If OpenSearch rejects or cannot serve the search; other errors propagate unchanged
        """
        index_name = index_name or self.config.index_name

        try:
            search_body = {
                'size': top_k,
                'query': {
                    'bool': {
                        'must': [{
                            'knn': {
                                self.config.vector_field: {
                                    'vector': query_vector,
                                    'k': top_k
                                }
                            }
                        }],
                        'filter': [{
                            'term': {
                                self.config.scope_field: scope_tag
                            }
                        }]
                    }
                },
                '_source': {
                    'excludes': [self.config.vector_field]  # Don't return embedding in results
                }
            }

            response = await self.client.search(index=index_name, body=search_body)

            results = [self._to_document(hit) for hit in response['hits']['hits']]

            logger.debug(f'Vector search returned {len(results)} results for scope {scope_tag}')
            return results

        except OpenSearchException as e:
            logger.error(f'Error performing vector search: {e}')
            raise OpenSearchError(f'Vector search failed: {e}') from e

    async def health_check(self) -> bool:
        """
        Perform a health check on the OpenSearch service.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            return await self.index_exists()

        except Exception as e:
            logger.error(f'OpenSearch health check failed: {e}')
            return False

    async def close(self) -> None:
        await self.client.close()
