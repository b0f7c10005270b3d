"""
Chart calculation utilities

Data integrity checks and the metrics summary produced after each render.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from .models import ChartMetrics, Dimensions, Point


@dataclass(frozen=True)
class PointValidation:
    """Outcome of a data integrity check"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def format_metric_price(price: float) -> float:
    """
    Round a price for metrics output.

    Prices below 0.01 keep 6 significant digits, everything else is rounded
    to 2 decimal places.
    """
    if price == 0:
        return 0.0
    if abs(price) < 0.01:
        return float(f"{price:.6g}")
    return float(f"{price:.2f}")


def format_size(dimensions: Dimensions) -> str:
    """Canvas size as 'WxH@DPRx', e.g. '800x360@1.5x'"""
    return f"{dimensions.width}x{dimensions.height}@{dimensions.dpr:g}x"


def generate_chart_metrics(raw_points: Sequence[Point],
                           downsampled_points: Sequence[Point],
                           entry_price: float,
                           is_bullish: bool,
                           output_path: str,
                           output_bytes: int,
                           dimensions: Dimensions) -> ChartMetrics:
    """
    Generate chart metrics for output.

    Args:
        raw_points: Series as fetched, before downsampling
        downsampled_points: Series that was rendered
        entry_price: Entry price drawn on the chart
        is_bullish: Sentiment used for the theme
        output_path: Local path, public URL or 'memory'
        output_bytes: Size of the optimized image
        dimensions: Logical canvas size and dpr

    Returns:
        ChartMetrics summary
    """
    last_price = raw_points[-1].y if raw_points else 0.0

    return ChartMetrics(
        points_raw=len(raw_points),
        points_downsampled=len(downsampled_points),
        is_bullish=is_bullish,
        entry_price=format_metric_price(entry_price),
        last_price=format_metric_price(last_price),
        output_bytes=output_bytes,
        output_path=output_path,
        size=format_size(dimensions),
    )


def validate_point_data(points: Sequence[Point]) -> PointValidation:
    """
    Validate point data integrity.

    Checks for an empty or too short series, non-finite values, negative
    prices and timestamps that are not strictly increasing. All problems are
    collected rather than stopping at the first one.

    Args:
        points: Series ordered by timestamp

    Returns:
        PointValidation with is_valid flag and error messages
    """
    errors: List[str] = []

    if not points:
        return PointValidation(is_valid=False, errors=["Data is empty"])

    if len(points) < 2:
        errors.append("Insufficient data points (minimum 2 required)")

    for index, point in enumerate(points):
        if point is None:
            errors.append(f"Missing point at index {index}")
            continue

        if not math.isfinite(point.t) or not math.isfinite(point.y):
            errors.append(f"Invalid values at index {index}: t={point.t}, y={point.y}")
        elif point.y < 0:
            errors.append(f"Negative price at index {index}: {point.y}")

    for index in range(1, len(points)):
        previous, current = points[index - 1], points[index]
        if previous is None or current is None:
            continue
        if not current.t > previous.t:
            errors.append(f"Time ordering violation at index {index}: {current.t} <= {previous.t}")

    return PointValidation(is_valid=not errors, errors=errors)
