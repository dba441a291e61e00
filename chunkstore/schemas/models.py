"""
Data models for the chunk store pipeline.

Defines the time series structures that flow between the codec,
the grouping/merge stage and the analysis engine.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional


Record = Dict[str, Any]
"""Attribute mapping as returned by or sent to the document store."""


@dataclass(frozen=True)
class Point:
    """A single observation of a time series."""
    timestamp: int
    value: float


@dataclass
class TimeSeries:
    """
    Time series made of attributes and chronologically ordered points.
    
    A chunk fetched from the store decodes into one of these; the
    fragments of one logical series are merged back into a single
    instance before analysis.
    """
    attributes: Dict[str, Any] = field(default_factory=dict)
    points: List[Point] = field(default_factory=list)
    
    @property
    def start(self) -> Optional[int]:
        """Timestamp of the first point, or None when empty."""
        return self.points[0].timestamp if self.points else None
    
    @property
    def end(self) -> Optional[int]:
        """Timestamp of the last point, or None when empty."""
        return self.points[-1].timestamp if self.points else None
    
    def add(self, timestamp: int, value: float) -> None:
        """Append a point."""
        self.points.append(Point(int(timestamp), float(value)))
    
    def add_all(self, points: Iterable[Point]) -> None:
        """Append points in the given order."""
        self.points.extend(points)
    
    def timestamps(self) -> List[int]:
        return [point.timestamp for point in self.points]
    
    def values(self) -> List[float]:
        return [point.value for point in self.points]
    
    def size(self) -> int:
        return len(self.points)
    
    def is_empty(self) -> bool:
        return not self.points
    
    def attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


def join_key(*fields: str, separator: str = "-") -> Callable[[TimeSeries], str]:
    """
    Build a key function joining the given attribute values.
    
    Missing attributes contribute an empty string so that the key
    stays positional.
    
    Args:
        fields: Attribute names making up the key
        separator: String placed between the values
    
    Returns:
        Function mapping a time series to its grouping key
    """
    if not fields:
        raise ValueError("join_key requires at least one attribute name")
    
    def _key(series: TimeSeries) -> str:
        return separator.join(
            "" if series.attributes.get(name) is None else str(series.attributes[name])
            for name in fields
        )
    
    return _key
