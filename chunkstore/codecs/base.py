"""
Codec contract shared by all payload formats.

A codec turns a time series into a storable record and back. Each
payload format is an independent strategy object satisfying
``TimeSeriesCodec``; the helpers below are plain functions so that
formats never need a common base class.
"""

import base64
import binascii
from typing import Any, Dict, Iterable, List, Protocol, Tuple

from chunkstore.schemas.models import Point, Record, TimeSeries
from chunkstore.utils.errors import CodecError


DATA = "data"
START = "start"
END = "end"

RESERVED_FIELDS = (DATA, START, END)


class TimeSeriesCodec(Protocol):
    """Capability to encode and decode time series records."""
    
    def encode(self, series: TimeSeries) -> Record:
        ...
    
    def decode(self, record: Record, start: int, end: int) -> TimeSeries:
        ...


def record_attributes(record: Record) -> Dict[str, Any]:
    """Return the non-reserved attributes of a record."""
    return {name: value for name, value in record.items() if name not in RESERVED_FIELDS}


def series_attributes(series: TimeSeries) -> Record:
    """Record fields of a series without its payload."""
    record: Record = {
        name: value for name, value in series.attributes.items() if name not in RESERVED_FIELDS
    }
    record[START] = series.start
    record[END] = series.end
    return record


def build_record(series: TimeSeries, payload: bytes) -> Record:
    """Build a record from series attributes and an encoded payload."""
    record = series_attributes(series)
    record[DATA] = payload
    return record


def payload_bytes(record: Record, codec_name: str) -> bytes:
    """
    Extract the binary payload of a record.
    
    Stores reached over text protocols hand the blob back base64
    encoded, so strings are decoded before use.
    """
    if DATA not in record or record[DATA] is None:
        raise CodecError("Record has no payload", codec=codec_name, field=DATA)
    
    payload = record[DATA]
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    if isinstance(payload, str):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CodecError(
                f"Payload is not valid base64: {e}", codec=codec_name, field=DATA
            ) from e
    
    raise CodecError(
        f"Unsupported payload type {type(payload).__name__}", codec=codec_name, field=DATA
    )


def window_points(pairs: Iterable[Tuple[int, float]], start: int, end: int) -> List[Point]:
    """Keep the (timestamp, value) pairs inside [start, end), in order."""
    return [
        Point(int(timestamp), float(value))
        for timestamp, value in pairs
        if start <= timestamp < end
    ]
