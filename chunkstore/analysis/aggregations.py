"""Low-level aggregations over the point values of a window."""

import math

import numpy as np


def _or_nan(values: np.ndarray, func) -> float:
    if values.size == 0:
        return math.nan
    return float(func(values))


def minimum(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, np.min)


def maximum(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, np.max)


def average(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, np.mean)


def deviation(timestamps: np.ndarray, values: np.ndarray) -> float:
    """Population standard deviation."""
    return _or_nan(values, np.std)


def total(timestamps: np.ndarray, values: np.ndarray) -> float:
    return float(np.sum(values))


def count(timestamps: np.ndarray, values: np.ndarray) -> float:
    return float(values.size)


def first(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, lambda v: v[0])


def last(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, lambda v: v[-1])


def value_range(timestamps: np.ndarray, values: np.ndarray) -> float:
    return _or_nan(values, np.ptp)


def difference(timestamps: np.ndarray, values: np.ndarray) -> float:
    """Absolute difference between the last and the first value."""
    return _or_nan(values, lambda v: abs(v[-1] - v[0]))


def signed_difference(timestamps: np.ndarray, values: np.ndarray) -> float:
    """Last value minus first value."""
    return _or_nan(values, lambda v: v[-1] - v[0])


def percentile(timestamps: np.ndarray, values: np.ndarray, quantile: float) -> float:
    """
    Percentile of the values.
    
    Args:
        quantile: Requested quantile in (0, 1]
    """
    return _or_nan(values, lambda v: np.percentile(v, quantile * 100.0))
