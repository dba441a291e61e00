"""
Schema definitions for the chunk store.

Provides the data model shared by all pipeline stages:
- Points and time series
- Store records
- Grouping key helpers
"""

from .models import Point, TimeSeries, Record, join_key

__all__ = [
    "Point",
    "TimeSeries",
    "Record",
    "join_key",
]
