"""Sentiment-based chart styling."""

from ..chart_config import ChartStyleConfig
from ..models import ChartStyle


def get_chart_style(is_bullish: bool) -> ChartStyle:
    """
    Determine chart colors from market sentiment.

    Args:
        is_bullish: True for a long position (green), False for short (red)

    Returns:
        ChartStyle with line, entry line, background and grid colors
    """
    colors = ChartStyleConfig.get_colors()
    line_color = colors['bullish'] if is_bullish else colors['bearish']

    return ChartStyle(
        line_color=line_color,
        background_gradient_start=colors['background_start'],
        background_gradient_end=colors['background_end'],
        grid_color=colors['grid'],
        entry_line_color=line_color,
    )
