"""
Utility modules for the chunk store.

Provides common utilities for:
- Structured logging
- Error handling
"""

from .logging import setup_logging, configure_logging, bind_query
from .errors import (
    ChunkStoreError,
    ValidationError,
    InvalidAnalysisRequestError,
    StorageError,
    RetrievalError,
    CodecError,
    ConfigurationError,
)

__all__ = [
    "setup_logging",
    "configure_logging",
    "bind_query",
    "ChunkStoreError",
    "ValidationError",
    "InvalidAnalysisRequestError",
    "StorageError",
    "RetrievalError",
    "CodecError",
    "ConfigurationError",
]
