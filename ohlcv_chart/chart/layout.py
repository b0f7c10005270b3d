"""Default chart geometry derived from the canvas size."""

from ..chart_config import ChartStyleConfig
from ..models import ChartConfig, Dimensions, Padding
from .style import get_chart_style


def calculate_padding(width: int, height: int) -> Padding:
    """Plot insets as a fixed fraction of the canvas size"""
    ratios = ChartStyleConfig.get_padding_ratios()
    return Padding(
        left=round(width * ratios['left_ratio']),
        right=round(width * ratios['right_ratio']),
        top=round(height * ratios['top_ratio']),
        bottom=round(height * ratios['bottom_ratio']),
    )


def calculate_optimal_downsample_width(chart_width: int, dpr: float, multiplier: float = 2) -> int:
    """Downsample budget for a physical raster: width * dpr * multiplier"""
    return round(chart_width * dpr * multiplier)


def create_default_chart_config(width: int, height: int, dpr: float,
                                is_bullish: bool = True,
                                include_axes: bool = True) -> ChartConfig:
    """
    Create the chart configuration for a canvas.

    Args:
        width: Logical canvas width
        height: Logical canvas height
        dpr: Device pixel ratio
        is_bullish: Sentiment used to pick the style
        include_axes: Whether price/time labels are drawn

    Returns:
        ChartConfig with padding, style and downsample budget filled in
    """
    multiplier = ChartStyleConfig.CHART_DEFAULTS['downsample_multiplier']
    return ChartConfig(
        dimensions=Dimensions(width=width, height=height, dpr=dpr),
        padding=calculate_padding(width, height),
        style=get_chart_style(is_bullish),
        downsample_width=round(width * multiplier),
        include_axes=include_axes,
    )
