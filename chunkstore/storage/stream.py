"""Lazy paged retrieval of raw records."""

from typing import Any, Iterator, List

import structlog

from chunkstore.schemas.models import Record
from chunkstore.storage.connection import DocumentStoreConnection
from chunkstore.utils.errors import RetrievalError
from chunkstore.utils.logging import bind_query


logger = structlog.get_logger()


class ChunkRetrievalStream:
    """
    Iterator over the records matching a query.
    
    Records are fetched ``page_size`` at a time and only when the
    previous page has been consumed. The total number of records is not
    known in advance; a page shorter than ``page_size`` ends the stream.
    Retrieval failures are raised to the consumer as ``RetrievalError``
    and are not retried.
    """
    
    def __init__(self, connection: DocumentStoreConnection, query: Any, page_size: int):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        
        self.connection = connection
        self.query = query
        self.page_size = page_size
        self.logger = bind_query(logger.bind(component="chunk_retrieval_stream"), query)
        
        self._buffer: List[Record] = []
        self._position = 0
        self._offset = 0
        self._exhausted = False
        self.pages_fetched = 0
    
    def __iter__(self) -> Iterator[Record]:
        return self
    
    def __next__(self) -> Record:
        if self._position >= len(self._buffer):
            if self._exhausted:
                raise StopIteration
            self._fetch_page()
            if not self._buffer:
                raise StopIteration
        
        record = self._buffer[self._position]
        self._position += 1
        return record
    
    def _fetch_page(self) -> None:
        """Fetch the next page from the store."""
        try:
            page = list(self.connection.query(self.query, self._offset, self.page_size))
        except Exception as e:
            self._exhausted = True
            self.logger.error(
                "Page fetch failed",
                offset=self._offset,
                limit=self.page_size,
                error=str(e),
            )
            raise RetrievalError(
                f"Failed to fetch records at offset {self._offset}: {e}",
                offset=self._offset,
                limit=self.page_size,
            ) from e
        
        self.pages_fetched += 1
        self.logger.debug(
            "Fetched page",
            offset=self._offset,
            limit=self.page_size,
            records=len(page),
        )
        
        self._buffer = page
        self._position = 0
        self._offset += len(page)
        
        if len(page) < self.page_size:
            self._exhausted = True
