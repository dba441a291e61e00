"""
High-level detectors.

Each detector returns a non-negative value when it finds the condition
it looks for and ``NOTHING_FOUND`` otherwise.
"""

import numpy as np


NOTHING_FOUND = -1.0
FOUND = 1.0


def trend(timestamps: np.ndarray, values: np.ndarray) -> float:
    """Report series whose least squares slope is positive."""
    if values.size < 2 or np.ptp(timestamps) == 0:
        return NOTHING_FOUND
    
    # shift to the first timestamp to keep epoch values well conditioned
    slope = np.polyfit(timestamps - timestamps[0], values, 1)[0]
    return FOUND if slope > 0 else NOTHING_FOUND


def outlier(timestamps: np.ndarray, values: np.ndarray) -> float:
    """Report series with a value above Q3 + 1.5 * IQR."""
    if values.size == 0:
        return NOTHING_FOUND
    
    q1, q3 = np.percentile(values, [25.0, 75.0])
    threshold = q3 + 1.5 * (q3 - q1)
    return FOUND if np.any(values > threshold) else NOTHING_FOUND


def frequency(timestamps: np.ndarray, values: np.ndarray, window_size: int, threshold: int) -> float:
    """
    Report series whose point rate jumps between consecutive windows.
    
    The window starting at the first timestamp and every following
    window of ``window_size`` time units are counted, empty windows
    included. A count growing by more than ``threshold`` from one window
    to the next is a finding.
    """
    if timestamps.size < 2:
        return NOTHING_FOUND
    
    buckets = (timestamps - timestamps.min()) // window_size
    counts = np.bincount(buckets.astype(np.int64))
    if np.any(np.diff(counts) > threshold):
        return FOUND
    return NOTHING_FOUND
