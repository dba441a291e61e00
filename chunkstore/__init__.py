"""
chunkstore: time series reconstruction over paginated document stores.

Chunks of logical time series are streamed from the store, decoded by a
pluggable codec, grouped by join key and merged; merged series can be
reduced to statistics or detector results over a time window.
"""

from .analysis import AnalysisRequest, AnalysisType, parse_analysis_request
from .codecs import BinaryCodec, JsonGzipCodec, TimeSeriesCodec
from .framework import StorageConfig
from .schemas import Point, TimeSeries, join_key
from .service import TimeSeriesStorage
from .storage import merge_append, merge_sorted

__version__ = "0.1.0"

__all__ = [
    "AnalysisRequest",
    "AnalysisType",
    "parse_analysis_request",
    "BinaryCodec",
    "JsonGzipCodec",
    "TimeSeriesCodec",
    "StorageConfig",
    "Point",
    "TimeSeries",
    "join_key",
    "TimeSeriesStorage",
    "merge_append",
    "merge_sorted",
]
