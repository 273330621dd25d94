"""
Geometry kernel for annotation-space calculations.

Pure functions only: distances, the longest pairwise diameter, rectangle
normalization and percentage-space transforms. Points may be given as
``Point`` models or ``(x, y)`` tuples.
"""

import math
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from roi_engine.core.constants import AnnotationSpace, MeasurementConstants
from roi_engine.schemas.common import Point

PointLike = Union[Point, Tuple[float, float], Sequence[float]]


def _xy(point: PointLike) -> Tuple[float, float]:
    if isinstance(point, Point):
        return point.x, point.y
    return float(point[0]), float(point[1])


def as_array(points: Iterable[PointLike]) -> np.ndarray:
    """Convert points to an (N, 2) float array."""
    coords = [_xy(p) for p in points]
    if not coords:
        return np.empty((0, 2), dtype=np.float64)
    return np.asarray(coords, dtype=np.float64)


def longest_pairwise_distance(points: Iterable[PointLike]) -> float:
    """
    Maximum Euclidean distance over all unordered pairs of points.

    This is the "longest diameter" of a region. Every pair is compared on
    squared distance and only the winner is square-rooted. Point counts per
    region are small (tens), so the full N x N comparison is acceptable.

    Args:
        points: Region vertices

    Returns:
        Longest diameter in annotation units, 0.0 for fewer than 2 points

    Example:
        >>> longest_pairwise_distance([(0, 0), (0, 3), (4, 0)])
        5.0
    """
    pts = as_array(points)
    if len(pts) < 2:
        return 0.0

    diffs = pts[:, np.newaxis, :] - pts[np.newaxis, :, :]
    max_dist_sq = float(np.max(np.sum(diffs * diffs, axis=-1)))
    return math.sqrt(max_dist_sq)


def to_millimetres(value: float, mm_per_unit: float = MeasurementConstants.MM_PER_UNIT) -> int:
    """
    Convert an annotation-space distance to whole millimetre-equivalents.

    The linear factor is a placeholder calibration, not a true pixel spacing.
    """
    return int(math.floor(value * mm_per_unit))


def rect_to_polygon(start: PointLike, end: PointLike) -> List[Point]:
    """
    Expand two rectangle corners into a 4-point polygon.

    Winding is fixed as [(x1,y1), (x2,y1), (x2,y2), (x1,y2)] starting at the
    down-point corner, whatever the drag direction.
    """
    x1, y1 = _xy(start)
    x2, y2 = _xy(end)
    return [
        Point(x=x1, y=y1),
        Point(x=x2, y=y1),
        Point(x=x2, y=y2),
        Point(x=x1, y=y2),
    ]


def bounding_box(points: Iterable[PointLike]) -> Tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y); all zeros for an empty list."""
    pts = as_array(points)
    if len(pts) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return (float(min_x), float(min_y), float(max_x), float(max_y))


def to_percent(value: float, origin: float, extent: float) -> float:
    """Map a coordinate into percent of an extent; 0.0 when the extent is empty."""
    if extent <= 0:
        return 0.0
    return (value - origin) * AnnotationSpace.SCALE / extent


def from_percent(percent: float, origin: float, extent: float) -> float:
    """Inverse of :func:`to_percent`."""
    return origin + percent * extent / AnnotationSpace.SCALE


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def points_to_pixels(points: Iterable[PointLike], width: int, height: int) -> np.ndarray:
    """
    Convert annotation-space points to integer pixel coordinates.

    Returns an (N, 1, 2) int32 array, the contour layout OpenCV expects.
    """
    pts = as_array(points)
    if len(pts) == 0:
        return np.empty((0, 1, 2), dtype=np.int32)
    scale = np.array([width, height], dtype=np.float64) / AnnotationSpace.SCALE
    pixels = np.rint(pts * scale).astype(np.int32)
    return pixels.reshape(-1, 1, 2)
