"""
Long-term semantic retrieval over the OpenSearch vector index.
"""

from typing import Optional

from ..models.core import SearchOutcome, SearchResult
from ..utils.bedrock_embed import BedrockEmbed, BedrockEmbedError
from ..utils.logging_config import get_logger
from ..utils.opensearch_client import OpenSearchClient, OpenSearchError

logger = get_logger(__name__)

DEFAULT_TOP_K = 3


class SemanticRetriever:
    """Best-effort similarity search scoped to one companion's corpus."""

    def __init__(self, opensearch: OpenSearchClient, embed: BedrockEmbed, top_k: int = DEFAULT_TOP_K):
        """Initialize the retriever.

        Args:
            opensearch: Client for the configured vector index
            embed: Embedding client used to vectorise queries
            top_k: Default number of results per search
        """
        self.opensearch = opensearch
        self.embed = embed
        self.top_k = top_k

    async def search(self, query_text: str, scope_tag: str, top_k: Optional[int] = None) -> SearchResult:
        """Find stored fragments similar to the query within one scope.

        Ranking is taken as returned by the index. Any failure is logged and reported
        as an empty result with outcome FAILED; nothing is raised to the caller.

        Args:
            query_text: Free text, usually the recent chat history
            scope_tag: Source file name the documents must belong to
            top_k: Maximum number of results (defaults to the retriever's top_k)

        Returns:
            SearchResult carrying the documents and the search outcome
        """
        if top_k is None:
            top_k = self.top_k
        if top_k < 1:
            logger.debug(f'Skipping vector search for scope {scope_tag}: top_k={top_k}')
            return SearchResult(outcome=SearchOutcome.NO_MATCHES)

        try:
            query_vector = await self.embed.aembed_query(query_text)
            documents = await self.opensearch.vector_search(query_vector, scope_tag, top_k=top_k)
        except (BedrockEmbedError, OpenSearchError) as e:
            logger.error(f'Failed to get vector search results for scope {scope_tag}: {e}')
            return SearchResult(outcome=SearchOutcome.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f'An unknown error occurred during vector search for scope {scope_tag}')
            return SearchResult(outcome=SearchOutcome.FAILED, error=repr(e))

        if not documents:
            logger.debug(f'No similar documents found for scope {scope_tag}')
            return SearchResult(outcome=SearchOutcome.NO_MATCHES)
        return SearchResult(documents=documents, outcome=SearchOutcome.MATCHED)
