"""Min-max bucket downsampling for line charts."""

import logging
import math
from typing import List, Optional, Sequence

from ..models import Point

logger = logging.getLogger(__name__)


def downsample_min_max(points: Sequence[Point], target_width: int) -> Sequence[Point]:
    """
    Reduce a time-ordered series while keeping its visual extremes.

    Series that already fit in 2 * target_width points are returned as-is.
    Otherwise the series is split into buckets of ceil(len / target_width)
    points and each bucket contributes its lowest and highest point, in time
    order.

    Args:
        points: Series ordered by ascending timestamp
        target_width: Display budget in buckets (usually pixels)

    Returns:
        The original sequence, or a new list of at most 2 points per bucket

    Raises:
        ValueError: If target_width is not positive
    """
    if target_width < 1:
        raise ValueError(f"target_width must be positive, got {target_width}")

    if len(points) <= target_width * 2:
        return points

    bucket_size = math.ceil(len(points) / target_width)
    downsampled: List[Point] = []

    for start in range(0, len(points), bucket_size):
        bucket = points[start:start + bucket_size]
        downsampled.extend(_extract_min_max(bucket))

    logger.debug(f"Downsampled {len(points)} points to {len(downsampled)} points "
                 f"(bucket size {bucket_size})")
    return downsampled


def _extract_min_max(bucket: Sequence[Point]) -> List[Point]:
    """Return the min and max point of a bucket in temporal order"""
    if not bucket:
        return []

    min_point: Optional[Point] = bucket[0]
    max_point: Optional[Point] = bucket[0]

    # Strict comparisons keep the first occurrence on ties
    for point in bucket:
        if point.y < min_point.y:
            min_point = point
        if point.y > max_point.y:
            max_point = point

    if min_point is max_point:
        return [min_point]

    return [min_point, max_point] if min_point.t < max_point.t else [max_point, min_point]
