"""
Coordinate Scaler

Maps series points from data space (milliseconds, price) into the logical
pixel space of the canvas.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

from ..chart_config import ChartStyleConfig
from ..exceptions import ScalingError
from ..models import Coordinate, Padding, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaledSeries:
    """
    Result of scaling a series onto the canvas.

    value_min/value_max are the bounds after the visual margin was applied,
    so they match the top and bottom edges of the inner plot area.
    """
    coordinates: Tuple[Coordinate, ...]
    x_scale: Callable[[float], float]
    y_scale: Callable[[float], float]
    value_min: float
    value_max: float
    time_min: int
    time_max: int


def scale_points_to_canvas(points: Sequence[Point],
                           canvas_width: float,
                           canvas_height: float,
                           padding: Padding,
                           margin_ratio: float = ChartStyleConfig.GRID['y_margin_ratio']) -> ScaledSeries:
    """
    Build the x/y scale functions for a series and scale every point.

    Args:
        points: Non-empty series ordered by timestamp
        canvas_width: Logical canvas width
        canvas_height: Logical canvas height
        padding: Plot insets
        margin_ratio: Fraction of the value range added above and below

    Returns:
        ScaledSeries with coordinates and the scale functions

    Raises:
        ScalingError: If the series is empty
    """
    if not points:
        raise ScalingError("Cannot scale empty points array")

    inner_width = canvas_width - padding.left - padding.right
    inner_height = canvas_height - padding.top - padding.bottom

    # Series is time-ordered, the first and last points are the time extremes
    time_min = points[0].t
    time_max = points[-1].t
    time_span = time_max - time_min

    value_min = min(point.y for point in points)
    value_max = max(point.y for point in points)

    # Flat series get a fixed margin so the line is not flush with the edges
    margin = (value_max - value_min) * margin_ratio or 1.0
    value_min -= margin
    value_max += margin
    value_span = value_max - value_min

    def x_scale(timestamp: float) -> float:
        if time_span == 0:
            return float(padding.left)
        return padding.left + ((timestamp - time_min) / time_span) * inner_width

    def y_scale(value: float) -> float:
        return padding.top + (1 - (value - value_min) / value_span) * inner_height

    coordinates = tuple(Coordinate(x=x_scale(point.t), y=y_scale(point.y)) for point in points)

    logger.debug(f"Scaled {len(points)} points to canvas coordinates "
                 f"(value range {value_min:.6g} - {value_max:.6g})")

    return ScaledSeries(
        coordinates=coordinates,
        x_scale=x_scale,
        y_scale=y_scale,
        value_min=value_min,
        value_max=value_max,
        time_min=time_min,
        time_max=time_max,
    )
