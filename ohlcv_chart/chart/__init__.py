"""
Chart Rendering Components

This package contains the modular components of the rendering core:
- downsample_min_max: Min-max bucket downsampling
- scale_points_to_canvas: Data to pixel coordinate mapping
- get_chart_style: Sentiment color theme
- LayerRenderer: Fixed-order layer drawing onto a ChartSurface
"""

from .downsampler import downsample_min_max
from .scaler import ScaledSeries, scale_points_to_canvas
from .style import get_chart_style
from .layout import create_default_chart_config, calculate_optimal_downsample_width
from .canvas import ChartSurface, setup_chart_surface
from .layer_renderer import LayerRenderer
from .formatting import format_price_label, format_time_label

__all__ = [
    'downsample_min_max',
    'ScaledSeries',
    'scale_points_to_canvas',
    'get_chart_style',
    'create_default_chart_config',
    'calculate_optimal_downsample_width',
    'ChartSurface',
    'setup_chart_surface',
    'LayerRenderer',
    'format_price_label',
    'format_time_label',
]
