# src/normalize.py
from typing import NamedTuple
import numpy as np

from order_stats import median, select_rank

LOWER_PERCENTILE = 0.05
UPPER_PERCENTILE = 0.95
MIN_EXTENT = 1e-6


class RobustFrame(NamedTuple):
    center: np.ndarray   # (3,) component-wise median
    scale: float         # isotropic factor, always > 0
    extent: np.ndarray   # (3,) upper - lower percentile per axis
    low: np.ndarray      # (3,) lower percentile per axis
    high: np.ndarray     # (3,) upper percentile per axis


def robust_frame(
    xs: np.ndarray,
    ys: np.ndarray,
    zs: np.ndarray,
    lower: float = LOWER_PERCENTILE,
    upper: float = UPPER_PERCENTILE,
    min_extent: float = MIN_EXTENT,
    copy: bool = False,
) -> RobustFrame:
    """
    Median center and trimmed-range scale of three coordinate arrays.

    Per axis: median first, then the lower and upper percentiles on the same,
    already partially ordered, array. The arrays are reordered in place unless
    copy=True. Results are identical either way.

    scale = 1 / max(extent) if that exceeds min_extent, else 1.0.
    """
    if not 0.0 <= lower <= upper <= 1.0:
        raise ValueError(f"need 0 <= lower <= upper <= 1, got lower={lower}, upper={upper}")

    center, low, high = [], [], []
    for axis in (xs, ys, zs):
        if copy:
            axis = np.array(axis, dtype=np.float64)
        center.append(median(axis))
        low.append(select_rank(axis, lower))
        high.append(select_rank(axis, upper))

    center = np.array(center, dtype=np.float64)
    low = np.array(low, dtype=np.float64)
    high = np.array(high, dtype=np.float64)
    extent = high - low

    # halved ranges cannot overflow, so scale stays > 0 even when high - low
    # exceeds the float range; halving is exact, so normal inputs are unaffected
    half = float((high * 0.5 - low * 0.5).max())
    scale = 0.5 / half if half > 0.5 * min_extent else 1.0
    return RobustFrame(center=center, scale=scale, extent=extent, low=low, high=high)


def normalize_points(points: np.ndarray, center, scale: float) -> np.ndarray:
    """(p - center) * scale for every row; same result as translate then scale about the origin."""
    pts = np.asarray(points, dtype=np.float64)
    return (pts - np.asarray(center, dtype=np.float64).reshape(1, 3)) * float(scale)
