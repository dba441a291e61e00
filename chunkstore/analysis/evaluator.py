"""
Analysis dispatch.

Maps every ``AnalysisType`` to its implementation, parameter parser and
suppression threshold, validates requests and evaluates them over the
points of a [start, end) window.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

import numpy as np
import structlog

from chunkstore.analysis import aggregations, detectors
from chunkstore.analysis.types import AnalysisRequest, AnalysisType
from chunkstore.schemas.models import Point
from chunkstore.utils.errors import InvalidAnalysisRequestError


logger = structlog.get_logger()

ParamParser = Callable[[AnalysisRequest], Tuple[Any, ...]]


def _no_params(request: AnalysisRequest) -> Tuple[Any, ...]:
    if request.params:
        raise InvalidAnalysisRequestError(
            f"{request.type.value} takes no parameters, got {len(request.params)}",
            analysis=request.type.value,
            params=request.params,
        )
    return ()


def _expect_params(request: AnalysisRequest, names: Tuple[str, ...]) -> None:
    if len(request.params) != len(names):
        raise InvalidAnalysisRequestError(
            f"{request.type.value} expects parameters ({', '.join(names)}), "
            f"got {len(request.params)}",
            analysis=request.type.value,
            params=request.params,
        )


def _number(request: AnalysisRequest, raw: str, name: str, cast: Callable[[str], Any]) -> Any:
    try:
        value = cast(raw)
    except ValueError:
        raise InvalidAnalysisRequestError(
            f"{request.type.value} parameter '{name}' is not a valid number: {raw!r}",
            analysis=request.type.value,
            params=request.params,
        ) from None
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidAnalysisRequestError(
            f"{request.type.value} parameter '{name}' must be finite, got {raw!r}",
            analysis=request.type.value,
            params=request.params,
        )
    return value


def _percentile_params(request: AnalysisRequest) -> Tuple[Any, ...]:
    _expect_params(request, ("quantile",))
    quantile = _number(request, request.params[0], "quantile", float)
    if not 0.0 < quantile <= 1.0:
        raise InvalidAnalysisRequestError(
            f"P quantile must be in (0, 1], got {quantile}",
            analysis=request.type.value,
            params=request.params,
        )
    return (quantile,)


def _frequency_params(request: AnalysisRequest) -> Tuple[Any, ...]:
    _expect_params(request, ("window_size", "threshold"))
    window_size = _number(request, request.params[0], "window_size", int)
    threshold = _number(request, request.params[1], "threshold", int)
    if window_size <= 0:
        raise InvalidAnalysisRequestError(
            f"FREQUENCY window_size must be positive, got {window_size}",
            analysis=request.type.value,
            params=request.params,
        )
    if threshold < 0:
        raise InvalidAnalysisRequestError(
            f"FREQUENCY threshold must not be negative, got {threshold}",
            analysis=request.type.value,
            params=request.params,
        )
    return (window_size, threshold)


@dataclass(frozen=True)
class AnalysisDefinition:
    """Implementation details of one analysis type."""
    function: Callable[..., float]
    parse_params: ParamParser = field(default=_no_params)
    # high-level results below this value mean nothing was found
    suppress_below: float = 0.0


ANALYSES: Dict[AnalysisType, AnalysisDefinition] = {
    AnalysisType.MIN: AnalysisDefinition(aggregations.minimum),
    AnalysisType.MAX: AnalysisDefinition(aggregations.maximum),
    AnalysisType.AVG: AnalysisDefinition(aggregations.average),
    AnalysisType.DEV: AnalysisDefinition(aggregations.deviation),
    AnalysisType.SUM: AnalysisDefinition(aggregations.total),
    AnalysisType.COUNT: AnalysisDefinition(aggregations.count),
    AnalysisType.FIRST: AnalysisDefinition(aggregations.first),
    AnalysisType.LAST: AnalysisDefinition(aggregations.last),
    AnalysisType.RANGE: AnalysisDefinition(aggregations.value_range),
    AnalysisType.DIFF: AnalysisDefinition(aggregations.difference),
    AnalysisType.SDIFF: AnalysisDefinition(aggregations.signed_difference),
    AnalysisType.P: AnalysisDefinition(aggregations.percentile, _percentile_params),
    AnalysisType.TREND: AnalysisDefinition(detectors.trend),
    AnalysisType.OUTLIER: AnalysisDefinition(detectors.outlier),
    AnalysisType.FREQUENCY: AnalysisDefinition(detectors.frequency, _frequency_params),
}


def get_definition(analysis: AnalysisType) -> AnalysisDefinition:
    definition = ANALYSES.get(analysis)
    if definition is None:
        raise InvalidAnalysisRequestError(
            f"No implementation registered for analysis {analysis!r}",
            analysis=str(analysis),
        )
    return definition


def validate(request: AnalysisRequest) -> Tuple[Any, ...]:
    """Check a request and return its parsed parameters."""
    if not isinstance(request, AnalysisRequest):
        raise InvalidAnalysisRequestError(
            f"Expected an AnalysisRequest, got {type(request).__name__}",
            analysis=repr(request),
        )
    if not all(isinstance(param, str) for param in request.params):
        raise InvalidAnalysisRequestError(
            f"{request.type.value} parameters must be strings",
            analysis=request.type.value,
            params=[repr(p) for p in request.params],
        )
    return get_definition(request.type).parse_params(request)


def evaluate(points: Iterable[Point], request: AnalysisRequest, start: int, end: int) -> float:
    """
    Evaluate an analysis over the points inside [start, end).
    
    The request is validated before any point is looked at.
    
    Args:
        points: Chronologically ordered points of a merged series
        request: Analysis to run
        start: Window start (inclusive)
        end: Window end (exclusive)
    
    Returns:
        The aggregate for low-level analyses; for high-level analyses a
        value below the type's suppression threshold when nothing was found
    """
    params = validate(request)
    definition = get_definition(request.type)
    
    window = [point for point in points if start <= point.timestamp < end]
    timestamps = np.fromiter((point.timestamp for point in window), dtype=np.int64, count=len(window))
    values = np.fromiter((point.value for point in window), dtype=np.float64, count=len(window))
    
    value = float(definition.function(timestamps, values, *params))
    logger.debug("Evaluated analysis", analysis=str(request), points=len(window), value=value)
    return value


def is_suppressed(
    analysis: AnalysisType,
    value: float,
    thresholds: Optional[Dict[AnalysisType, float]] = None
) -> bool:
    """True when a high-level analysis found nothing."""
    if not analysis.is_high_level:
        return False
    if thresholds and analysis in thresholds:
        return value < thresholds[analysis]
    return value < get_definition(analysis).suppress_below
