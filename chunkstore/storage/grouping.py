"""
Grouping and merging of decoded time series fragments.

Grouping materializes every fragment of a query in memory before the
first merge; this bounds the query size by available memory.
"""

import heapq
from functools import reduce
from typing import Callable, Dict, Iterable, List, Sequence

from chunkstore.schemas.models import TimeSeries


KeyFunction = Callable[[TimeSeries], str]
MergeOperator = Callable[[TimeSeries, TimeSeries], TimeSeries]


def group_by(fragments: Iterable[TimeSeries], key: KeyFunction) -> Dict[str, List[TimeSeries]]:
    """
    Partition fragments by key.
    
    Groups appear in the order their first fragment was encountered and
    keep their fragments in encounter order.
    
    Args:
        fragments: Decoded fragments
        key: Function deriving the grouping key of a fragment
    
    Returns:
        Mapping from key to the fragments sharing it
    """
    grouped: Dict[str, List[TimeSeries]] = {}
    for fragment in fragments:
        grouped.setdefault(key(fragment), []).append(fragment)
    return grouped


def merge(fragments: Sequence[TimeSeries], operator: MergeOperator) -> TimeSeries:
    """
    Left-fold a non-empty list of fragments with the merge operator.
    
    The fold runs on a copy of the first fragment, so the operator may
    extend its left argument in place and the fragments stay untouched.
    """
    if not fragments:
        raise ValueError("Cannot merge an empty fragment list")
    
    head = fragments[0]
    merged = TimeSeries(attributes=dict(head.attributes), points=list(head.points))
    return reduce(operator, fragments[1:], merged)


def merge_append(first: TimeSeries, second: TimeSeries) -> TimeSeries:
    """
    Append the points of ``second`` to ``first`` in place.
    
    No sorting or overlap check is done: the result is chronological
    only if the fragments arrive in chronological, non-overlapping
    order.
    """
    first.add_all(second.points)
    return first


def merge_sorted(first: TimeSeries, second: TimeSeries) -> TimeSeries:
    """Merge a chronological fragment into a chronological ``first`` in place."""
    if not first.points or not second.points or second.points[0].timestamp >= first.points[-1].timestamp:
        first.add_all(second.points)
    else:
        first.points = list(heapq.merge(first.points, second.points, key=lambda point: point.timestamp))
    return first
