"""
Record codecs.

Each payload format is an independent strategy implementing
``encode(series) -> record`` and ``decode(record, start, end) -> series``:
- JsonGzipCodec (gzip compressed JSON points)
- BinaryCodec (zlib compressed packed points)
"""

from .base import TimeSeriesCodec, DATA, START, END
from .binary import BinaryCodec
from .json_gzip import JsonGzipCodec

__all__ = [
    "TimeSeriesCodec",
    "BinaryCodec",
    "JsonGzipCodec",
    "DATA",
    "START",
    "END",
]
