"""Packed binary point payloads."""

import struct
import zlib

import structlog

from chunkstore.codecs.base import build_record, payload_bytes, record_attributes, window_points
from chunkstore.schemas.models import Record, TimeSeries
from chunkstore.utils.errors import CodecError


logger = structlog.get_logger()

# little-endian int64 timestamp followed by float64 value
POINT_FORMAT = struct.Struct("<qd")


class BinaryCodec:
    """Stores points as zlib compressed fixed-width (int64, float64) pairs."""
    
    name = "binary"
    
    def __init__(self, compression_level: int = 6):
        if not 0 <= compression_level <= 9:
            raise ValueError(f"compression_level must be in [0, 9], got {compression_level}")
        self.compression_level = compression_level
    
    def encode(self, series: TimeSeries) -> Record:
        """Encode a series into a storable record."""
        try:
            raw = b"".join(POINT_FORMAT.pack(point.timestamp, point.value) for point in series.points)
        except struct.error as e:
            logger.error("Failed to pack series points", codec=self.name, error=str(e))
            raise CodecError(f"Cannot encode points as {self.name}: {e}", codec=self.name) from e
        
        return build_record(series, zlib.compress(raw, self.compression_level))
    
    def decode(self, record: Record, start: int, end: int) -> TimeSeries:
        """Decode a record, keeping only points inside [start, end)."""
        payload = payload_bytes(record, self.name)
        
        try:
            raw = zlib.decompress(payload)
        except zlib.error as e:
            logger.error("Failed to decompress record payload", codec=self.name, error=str(e))
            raise CodecError(f"Malformed {self.name} payload: {e}", codec=self.name) from e
        
        if len(raw) % POINT_FORMAT.size:
            raise CodecError(
                f"Payload length {len(raw)} is not a multiple of {POINT_FORMAT.size}",
                codec=self.name,
            )
        
        points = window_points(POINT_FORMAT.iter_unpack(raw), start, end)
        return TimeSeries(attributes=record_attributes(record), points=points)
    
    def __repr__(self) -> str:
        return f"BinaryCodec(compression_level={self.compression_level})"
