# src/order_stats.py
import math
import numpy as np


def rank_index(n: int, p: float) -> int:
    """Index of the p-th fractional rank in an array of length n: floor(p * (n - 1))."""
    return int(math.floor(p * (n - 1)))


def _check_values(values):
    if not isinstance(values, np.ndarray):
        raise TypeError("values must be a numpy array (it is reordered in place)")
    if values.ndim != 1:
        raise TypeError(f"values must be 1-D, got shape {values.shape}")
    if values.size == 0:
        raise ValueError("cannot take an order statistic of an empty array")


def select_rank(values: np.ndarray, p: float) -> float:
    """
    Value at fractional rank p in [0, 1], without a full sort.

    Partitions `values` IN PLACE so that values[k] (k = floor(p*(n-1))) holds
    the same element a full sort would put there, everything before it is <=
    and everything after it is >=. Order within each side is unspecified, so
    repeated calls on the same array see whatever state the last call left.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"rank p must be in [0, 1], got {p}")
    _check_values(values)
    k = rank_index(values.size, p)
    values.partition(k)
    return float(values[k])


def median(values: np.ndarray) -> float:
    """
    Element n//2 of the sorted order, partitions IN PLACE.

    For even n this is one of the two central values, not their average.
    Fine for centering a cloud; do not reuse it for statistical reporting.
    """
    _check_values(values)
    k = values.size // 2
    values.partition(k)
    return float(values[k])
