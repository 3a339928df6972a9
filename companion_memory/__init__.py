"""
Companion memory package initialization.
"""

# Setup logging configuration on package import
from .utils.logging_config import setup_logging

setup_logging()

from .models.core import CompanionKey, InvalidCompanionKeyError, SearchOutcome, SearchResult, SemanticDocument  # noqa: E402
from .services.memory_manager import MemoryManager, get_memory_manager, reset_memory_manager  # noqa: E402

__all__ = [
    'CompanionKey',
    'InvalidCompanionKeyError',
    'MemoryManager',
    'SearchOutcome',
    'SearchResult',
    'SemanticDocument',
    'get_memory_manager',
    'reset_memory_manager',
]
