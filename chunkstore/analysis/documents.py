"""
Result record assembly.

Pure functions building the outward record of one group: the merged
series attributes, the analysis outcome and the join key.
"""

from typing import Dict, List, Optional, Sequence

import structlog

from chunkstore.analysis.evaluator import evaluate, is_suppressed, validate
from chunkstore.analysis.types import AnalysisRequest, AnalysisType
from chunkstore.codecs.base import TimeSeriesCodec, series_attributes
from chunkstore.schemas.models import Record, TimeSeries
from chunkstore.storage.grouping import MergeOperator, merge


logger = structlog.get_logger()

VALUE = "value"
ANALYSIS = "analysis"
ANALYSIS_PARAM = "analysisParam"
JOIN_KEY = "joinKey"


def build_result(
    series: TimeSeries,
    key: str,
    codec: TimeSeriesCodec,
    request: Optional[AnalysisRequest] = None,
    value: Optional[float] = None,
    thresholds: Optional[Dict[AnalysisType, float]] = None
) -> Optional[Record]:
    """
    Build the result record of a merged series.
    
    Args:
        series: Merged series of the group
        key: Join key the group was formed with
        codec: Codec producing the payload of plain results
        request: Analysis that was run, if any
        value: Analysis outcome, required with ``request``
        thresholds: Per-type overrides of the suppression threshold
    
    Returns:
        The record, or None when a high-level analysis found nothing
    """
    if request is not None and value is None:
        raise ValueError("An analysis result needs a value")
    
    if request is not None and is_suppressed(request.type, value, thresholds):
        return None
    
    if request is None:
        record = dict(codec.encode(series))
    else:
        record = series_attributes(series)
        if not request.is_high_level:
            record[VALUE] = value
        record[ANALYSIS] = request.type.value
        record[ANALYSIS_PARAM] = request.joined_params()
    
    record[JOIN_KEY] = key
    return record


def analyze(
    key: str,
    fragments: Sequence[TimeSeries],
    request: AnalysisRequest,
    start: int,
    end: int,
    operator: MergeOperator,
    codec: TimeSeriesCodec,
    thresholds: Optional[Dict[AnalysisType, float]] = None
) -> Optional[Record]:
    """Merge one group's fragments, run the analysis and build its record."""
    validate(request)
    series = merge(fragments, operator)
    value = evaluate(series.points, request, start, end)
    result = build_result(series, key, codec, request, value, thresholds)
    
    if result is None:
        logger.debug("Suppressed result", join_key=key, analysis=str(request), value=value)
    return result


def collect(
    groups: Dict[str, List[TimeSeries]],
    request: AnalysisRequest,
    start: int,
    end: int,
    operator: MergeOperator,
    codec: TimeSeriesCodec,
    thresholds: Optional[Dict[AnalysisType, float]] = None
) -> List[Record]:
    """Analyze every group, dropping suppressed results."""
    validate(request)
    results = []
    for key, fragments in groups.items():
        result = analyze(key, fragments, request, start, end, operator, codec, thresholds)
        if result is not None:
            results.append(result)
    return results
