"""
Batched writer submitting encoded time series to the document store.
"""

import time
from typing import Any, Dict, Iterable, List

import structlog

from chunkstore.codecs.base import TimeSeriesCodec
from chunkstore.schemas.models import Record, TimeSeries
from chunkstore.storage.connection import DocumentStoreConnection


logger = structlog.get_logger()


class BatchedWriter:
    """Fail-fast batch writer for the document store."""
    
    def __init__(self, connection: DocumentStoreConnection, batch_size: int):
        """
        Initialize batch writer.
        
        Args:
            connection: Document store connection
            batch_size: Maximum number of records per submission
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        
        self.connection = connection
        self.batch_size = batch_size
        self.logger = logger.bind(component="batched_writer")
        
        # Statistics
        self.stats = {
            "batches_written": 0,
            "records_written": 0,
            "error_count": 0,
        }
    
    def add(self, codec: TimeSeriesCodec, series: Iterable[TimeSeries]) -> bool:
        """
        Encode and submit time series in sequential batches.
        
        Submission stops at the first rejected batch. Batches accepted
        before the rejection stay committed.
        
        Args:
            codec: Codec used to encode each series
            series: Time series to store
        
        Returns:
            True only if every batch was accepted
        """
        batch: List[Record] = []
        for item in series:
            batch.append(codec.encode(item))
            if len(batch) >= self.batch_size:
                if not self._submit(batch):
                    return False
                batch = []
        
        if batch:
            return self._submit(batch)
        return True
    
    def _submit(self, batch: List[Record]) -> bool:
        """
        Submit one batch to the store.
        
        Args:
            batch: Encoded records
        """
        start_time = time.time()
        
        try:
            accepted = self.connection.add(batch)
        except Exception as e:
            self.stats["error_count"] += 1
            self.logger.error(
                "Batch write failed",
                records=len(batch),
                batch_number=self.stats["batches_written"] + 1,
                error=str(e),
            )
            return False
        
        if not accepted:
            self.stats["error_count"] += 1
            self.logger.error(
                "Batch rejected by store",
                records=len(batch),
                batch_number=self.stats["batches_written"] + 1,
            )
            return False
        
        self.stats["batches_written"] += 1
        self.stats["records_written"] += len(batch)
        
        duration = time.time() - start_time
        self.logger.info(
            "Batch written",
            records=len(batch),
            duration_ms=int(duration * 1000),
        )
        return True
    
    def get_stats(self) -> Dict[str, Any]:
        """Get batch writer statistics."""
        return dict(self.stats)
