"""
Document store connection contract.

The store and its query language are owned by the caller; the pipeline
only needs paged reads and bulk writes.
"""

from typing import Any, Protocol, Sequence

from chunkstore.schemas.models import Record


class DocumentStoreConnection(Protocol):
    """Paged read and bulk write access to a document store."""
    
    def query(self, query: Any, offset: int, limit: int) -> Sequence[Record]:
        """Return at most ``limit`` records matching ``query`` starting at ``offset``."""
        ...
    
    def add(self, records: Sequence[Record]) -> bool:
        """Submit records; return False when the store rejects them."""
        ...
