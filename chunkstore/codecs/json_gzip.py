"""Gzip compressed JSON point payloads."""

import gzip
import json
import zlib

import structlog

from chunkstore.codecs.base import build_record, payload_bytes, record_attributes, window_points
from chunkstore.schemas.models import Record, TimeSeries
from chunkstore.utils.errors import CodecError


logger = structlog.get_logger()


class JsonGzipCodec:
    """
    Stores points as a gzip compressed JSON array of ``[timestamp, value]``.
    
    Readable with any JSON tooling once decompressed, at the cost of a
    larger payload than ``BinaryCodec``.
    """
    
    name = "json-gzip"
    
    def __init__(self, compression_level: int = 6):
        if not 0 <= compression_level <= 9:
            raise ValueError(f"compression_level must be in [0, 9], got {compression_level}")
        self.compression_level = compression_level
    
    def encode(self, series: TimeSeries) -> Record:
        """Encode a series into a storable record."""
        pairs = [[point.timestamp, point.value] for point in series.points]
        try:
            text = json.dumps(pairs, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize series points", codec=self.name, error=str(e))
            raise CodecError(f"Cannot encode points as {self.name}: {e}", codec=self.name) from e
        
        payload = gzip.compress(text.encode("utf-8"), compresslevel=self.compression_level)
        return build_record(series, payload)
    
    def decode(self, record: Record, start: int, end: int) -> TimeSeries:
        """Decode a record, keeping only points inside [start, end)."""
        payload = payload_bytes(record, self.name)
        
        try:
            pairs = json.loads(gzip.decompress(payload).decode("utf-8"))
            points = window_points(((ts, value) for ts, value in pairs), start, end)
        except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError, TypeError) as e:
            logger.error("Failed to decode record payload", codec=self.name, error=str(e))
            raise CodecError(f"Malformed {self.name} payload: {e}", codec=self.name) from e
        
        return TimeSeries(attributes=record_attributes(record), points=points)
    
    def __repr__(self) -> str:
        return f"JsonGzipCodec(compression_level={self.compression_level})"
