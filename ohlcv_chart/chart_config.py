"""
Chart Configuration Module

This module contains all configurable settings for chart generation including:
- Default canvas size and request defaults
- Sentiment color palette (bullish/bearish) and shared background colors
- Padding ratios, axis, grid and entry line styling
- Neon glow stroke layers
"""

from typing import Dict, Any, List


class ChartStyleConfig:
    """
    Configuration class for chart visualization settings.
    Provides the dark neon palette and layout ratios used by the renderer.
    """

    # Request and pipeline defaults
    CHART_DEFAULTS = {
        'width': 800,                  # Logical canvas width in pixels
        'height': 360,                 # Logical canvas height in pixels
        'dpr': 1.5,                    # Device pixel ratio
        'period_hours': 24,            # Time window to chart
        'min_data_points': 100,        # Minimum stored points for a valid chart
        'interval_minutes': 1,         # Fetch interval
        'output_dir': './data',        # Local output directory
        'max_query_limit': 10000,      # Max rows fetched per series
        'downsample_multiplier': 2,    # Downsample target = width * multiplier
    }

    # Color palette - Dark neon mode
    COLORS = {
        'bullish': '#00ffa2',          # Neon green line
        'bearish': '#ff5f6d',          # Neon red line
        'background_start': '#050607', # Gradient top
        'background_end': '#0b0f10',   # Gradient bottom
        'grid': '#ffffff14',           # White at 8% opacity
        'axis_labels': '#ffffff99',    # White at 60% opacity
    }

    # Padding as a fraction of the canvas size
    PADDING = {
        'left_ratio': 0.06,            # 48px at 800px width
        'right_ratio': 0.12,           # 96px at 800px width, room for price labels
        'top_ratio': 0.08,             # 29px at 360px height
        'bottom_ratio': 0.15,          # 54px at 360px height, room for time labels
    }

    AXIS = {
        'font_size_ratio': 0.01,       # Font size relative to canvas width
        'font_family': 'DejaVu Sans',  # Bundled with matplotlib, same glyphs everywhere
        'tick_length': 4,              # Tick mark length in px
        'label_padding': 8,            # Gap between axis and labels in px
        'line_height': 1.3,            # Multi-line label spacing (x font size)
        'y_ticks': 5,                  # Price ticks (drawn count is ticks + 1)
        'x_ticks': 5,                  # Time ticks (drawn count is ticks + 1)
        'line_width': 1.0,
    }

    GRID = {
        'horizontal_lines': 4,
        'vertical_lines': 5,
        'line_width': 1.0,
        'y_margin_ratio': 0.06,        # Vertical breathing room around the series
    }

    ENTRY_LINE = {
        'dash': (8, 8),                # On/off lengths in px
        'line_width': 1.5,
        'alpha': 0.6,
    }

    AREA_FILL = {
        'top_alpha': 0.12,             # Fades to fully transparent at the bottom
        'gradient_steps': 256,
    }

    # Neon glow effect - thick/transparent first, sharp core last
    NEON_STROKES = [
        {'width': 6, 'alpha': 0.25, 'blur': 18},   # Base glow
        {'width': 4, 'alpha': 0.6, 'blur': 8},     # Middle glow
        {'width': 2, 'alpha': 1.0, 'blur': 0},     # Core line
    ]

    # Known token addresses for quick lookup from the CLI
    KNOWN_TOKENS = {
        'JUP': 'JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN',
        'BONK': 'DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263',
    }

    # Image optimization
    IMAGE = {
        'format': 'PNG',
        'content_type': 'image/png',
        'compress_level': 6,
        'cache_control': 'public, max-age=31536000',
    }

    @classmethod
    def get_defaults(cls) -> Dict[str, Any]:
        """Get request and pipeline defaults"""
        return cls.CHART_DEFAULTS.copy()

    @classmethod
    def get_colors(cls) -> Dict[str, str]:
        """
        Get current palette.

        Returns:
            Dictionary containing all color settings
        """
        return cls.COLORS.copy()

    @classmethod
    def update_colors(cls, **kwargs):
        """
        Update specific palette colors dynamically.

        Args:
            **kwargs: Color settings to update (e.g., bullish='#00ff00')

        Example:
            >>> ChartStyleConfig.update_colors(bullish='#00ff00')
        """
        cls.COLORS.update(kwargs)

    @classmethod
    def get_padding_ratios(cls) -> Dict[str, float]:
        return cls.PADDING.copy()

    @classmethod
    def get_axis_config(cls) -> Dict[str, Any]:
        return cls.AXIS.copy()

    @classmethod
    def get_grid_config(cls) -> Dict[str, Any]:
        return cls.GRID.copy()

    @classmethod
    def get_entry_line_config(cls) -> Dict[str, Any]:
        return cls.ENTRY_LINE.copy()

    @classmethod
    def get_area_fill_config(cls) -> Dict[str, Any]:
        return cls.AREA_FILL.copy()

    @classmethod
    def get_neon_strokes(cls) -> List[Dict[str, float]]:
        """
        Get glow stroke layers in drawing order.

        Returns:
            List of dicts with width (px), alpha (0-1) and blur (px)
        """
        return [dict(stroke) for stroke in cls.NEON_STROKES]

    @classmethod
    def get_image_config(cls) -> Dict[str, Any]:
        return cls.IMAGE.copy()

    @classmethod
    def get_known_tokens(cls) -> Dict[str, str]:
        return cls.KNOWN_TOKENS.copy()
