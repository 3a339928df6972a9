"""
Core data models for the conversational memory system.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class InvalidCompanionKeyError(ValueError):
    """Raised when a companion key is missing one of its identifying fields."""
    pass


@dataclass(frozen=True)
class CompanionKey:
    """Identifies one conversation thread: an agent persona, the model serving it and the user.

    All three fields must be non-empty strings. Only the derived string form is persisted.
    """
    companion_name: str
    model_name: str
    user_id: str

    def __post_init__(self):
        for name in ('companion_name', 'model_name', 'user_id'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidCompanionKeyError(f'CompanionKey.{name} must be a non-empty string, got {value!r}')

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'CompanionKey':
        """Build a key from a caller-supplied dict.

        Accepts camelCase (companionName, modelName, userId) or snake_case field names.

        Raises:
            InvalidCompanionKeyError: If any field is absent or blank
        """
        return cls(companion_name=data.get('companionName', data.get('companion_name')),
                   model_name=data.get('modelName', data.get('model_name')),
                   user_id=data.get('userId', data.get('user_id')))


@dataclass
class HistoryEntry:
    """One line of conversational text and its ordering score."""
    text: str
    score: float


@dataclass
class SemanticDocument:
    """A fragment returned by the long-term similarity index."""
    id: str
    page_content: str
    metadata: Dict[str, Any]
    score: float


class SearchOutcome(str, Enum):
    MATCHED = 'matched'
    NO_MATCHES = 'no_matches'
    FAILED = 'failed'


@dataclass
class SearchResult:
    """Outcome of a best-effort semantic search.

    Callers always receive documents (possibly empty); the outcome and error are kept
    for diagnostics so an empty list caused by a failure stays distinguishable.
    """
    documents: List[SemanticDocument] = field(default_factory=list)
    outcome: SearchOutcome = SearchOutcome.NO_MATCHES
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is SearchOutcome.FAILED
