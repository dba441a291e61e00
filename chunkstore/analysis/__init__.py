"""
Analyses over merged time series.

Low-level analyses are statistics reported for every group; high-level
analyses are detectors whose negative result suppresses the group.
"""

from .types import AnalysisType, AnalysisRequest, parse_analysis_request
from .evaluator import evaluate, is_suppressed, validate
from .documents import build_result, analyze, collect

__all__ = [
    "AnalysisType",
    "AnalysisRequest",
    "parse_analysis_request",
    "evaluate",
    "is_suppressed",
    "validate",
    "build_result",
    "analyze",
    "collect",
]
