"""
Time series storage on top of a paginated document store.

Reads stream the chunks of a query, decode them, group them by join key
and merge every group into one series; the analysis path reduces each
merged series to a result record. Writes encode series and submit them
in batches.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional

import structlog

from chunkstore.analysis import documents
from chunkstore.analysis.evaluator import validate
from chunkstore.analysis.types import AnalysisRequest, AnalysisType
from chunkstore.codecs.base import TimeSeriesCodec
from chunkstore.framework.config import StorageConfig
from chunkstore.schemas.models import Record, TimeSeries
from chunkstore.storage.connection import DocumentStoreConnection
from chunkstore.storage.grouping import KeyFunction, MergeOperator, group_by, merge, merge_append
from chunkstore.storage.stream import ChunkRetrievalStream
from chunkstore.storage.writer import BatchedWriter
from chunkstore.utils.logging import bind_query


logger = structlog.get_logger()

MIN_TIMESTAMP = -(2 ** 63)
MAX_TIMESTAMP = 2 ** 63 - 1


class TimeSeriesStorage:
    """
    Storage service for chunked time series.
    
    Holds only its construction parameters, so one instance can serve
    concurrent independent calls.
    """
    
    def __init__(
        self,
        page_size: int,
        batch_size: int,
        key: KeyFunction,
        operator: MergeOperator = merge_append,
        suppression_thresholds: Optional[Dict[AnalysisType, float]] = None
    ):
        """
        Initialize the storage.
        
        Args:
            page_size: Records fetched per round trip
            batch_size: Records submitted per write
            key: Function deriving the join key of a series
            operator: Associative operator merging two fragments of one key
            suppression_thresholds: Per-type overrides of the value below
                which a high-level result counts as nothing found
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        
        self.page_size = page_size
        self.batch_size = batch_size
        self.key = key
        self.operator = operator
        self.suppression_thresholds = dict(suppression_thresholds or {})
        self.logger = logger.bind(component="time_series_storage")
    
    @classmethod
    def from_config(
        cls,
        config: StorageConfig,
        key: KeyFunction,
        operator: MergeOperator = merge_append
    ) -> "TimeSeriesStorage":
        """Create a storage from configuration."""
        return cls(config.page_size, config.batch_size, key, operator)
    
    def records(self, connection: DocumentStoreConnection, query: Any) -> ChunkRetrievalStream:
        """Lazily stream the raw records matching a query."""
        return ChunkRetrievalStream(connection, query, self.page_size)
    
    def groups(
        self,
        codec: TimeSeriesCodec,
        connection: DocumentStoreConnection,
        query: Any,
        start: int = MIN_TIMESTAMP,
        end: int = MAX_TIMESTAMP
    ) -> Dict[str, List[TimeSeries]]:
        """Fetch and decode every chunk of a query and group them by key."""
        fragments = (codec.decode(record, start, end) for record in self.records(connection, query))
        grouped = group_by(fragments, self.key)
        bind_query(self.logger, query).debug("Grouped fragments", groups=len(grouped))
        return grouped
    
    def stream(
        self,
        codec: TimeSeriesCodec,
        connection: DocumentStoreConnection,
        query: Any,
        start: int = MIN_TIMESTAMP,
        end: int = MAX_TIMESTAMP
    ) -> Iterator[TimeSeries]:
        """
        Stream the merged series of a query.
        
        Nothing is fetched until the first series is requested; at that
        point every chunk of the query is fetched and grouped.
        
        Args:
            codec: Codec decoding the records
            connection: Document store connection
            query: Store query selecting the chunks
            start: Keep points from this timestamp (inclusive)
            end: Keep points up to this timestamp (exclusive)
        """
        grouped = self.groups(codec, connection, query, start, end)
        for fragments in grouped.values():
            yield merge(fragments, self.operator)
    
    def documents(
        self,
        codec: TimeSeriesCodec,
        connection: DocumentStoreConnection,
        query: Any,
        start: int = MIN_TIMESTAMP,
        end: int = MAX_TIMESTAMP
    ) -> Iterator[Record]:
        """Stream result records with payload and join key for a plain query."""
        grouped = self.groups(codec, connection, query, start, end)
        for key, fragments in grouped.items():
            yield documents.build_result(merge(fragments, self.operator), key, codec)
    
    def analyze(
        self,
        codec: TimeSeriesCodec,
        connection: DocumentStoreConnection,
        query: Any,
        request: AnalysisRequest,
        start: int,
        end: int
    ) -> Iterator[Record]:
        """
        Stream the analysis results of a query, one per unsuppressed group.
        
        The request is validated before anything is fetched.
        
        Args:
            codec: Codec decoding the records
            connection: Document store connection
            query: Store query selecting the chunks
            request: Analysis to run on every merged series
            start: Analysis window start (inclusive)
            end: Analysis window end (exclusive)
        """
        validate(request)
        return self._analyze(codec, connection, query, request, start, end)
    
    def _analyze(self, codec, connection, query, request, start, end) -> Iterator[Record]:
        grouped = self.groups(codec, connection, query, start, end)
        emitted = 0
        for key, fragments in grouped.items():
            result = documents.analyze(
                key, fragments, request, start, end, self.operator, codec, self.suppression_thresholds
            )
            if result is not None:
                emitted += 1
                yield result
        
        bind_query(self.logger, query).debug(
            "Analysis finished",
            analysis=str(request),
            groups=len(grouped),
            results=emitted,
        )
    
    def add(
        self,
        codec: TimeSeriesCodec,
        series: Iterable[TimeSeries],
        connection: DocumentStoreConnection
    ) -> bool:
        """
        Encode and store series in batches.
        
        Returns:
            True only if every batch was accepted; stops at the first rejection
        """
        writer = BatchedWriter(connection, self.batch_size)
        success = writer.add(codec, series)
        
        self.logger.info("Stored time series", success=success, **writer.get_stats())
        return success
