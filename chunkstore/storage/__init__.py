"""
Storage pipeline stages.

Provides:
- Lazy paged retrieval of raw records
- Grouping and merging of decoded fragments
- Fail-fast batched writes
"""

from .connection import DocumentStoreConnection
from .grouping import group_by, merge, merge_append, merge_sorted
from .stream import ChunkRetrievalStream
from .writer import BatchedWriter

__all__ = [
    "DocumentStoreConnection",
    "ChunkRetrievalStream",
    "BatchedWriter",
    "group_by",
    "merge",
    "merge_append",
    "merge_sorted",
]
