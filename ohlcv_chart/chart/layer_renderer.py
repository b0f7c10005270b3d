#!/usr/bin/env python3
"""
Layer Renderer

This module handles pure chart rendering onto a ChartSurface.
Layers are drawn in a fixed order (background, grid, axes, entry line,
area fill, glow line) from the scaled series and the selected style.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

from ..chart_config import ChartStyleConfig
from ..models import ChartConfig, ChartData, ChartStyle, Coordinate, Padding, Point, StrokeLayer
from .canvas import ChartSurface, GaussianBlurFilter, hex_to_rgba
from .formatting import format_price_label, format_time_label
from .scaler import ScaledSeries, scale_points_to_canvas

logger = logging.getLogger(__name__)

# Paint order of the layers, later layers cover earlier ones
LAYER_ZORDER = {
    'background': 0,
    'grid': 1,
    'y_axis': 2,
    'x_axis': 3,
    'entry_line': 4,
    'area_fill': 5,
    'glow': 6,
}


class LayerRenderer:
    """Deterministic layered chart drawing"""

    def __init__(self, style_config=ChartStyleConfig):
        """
        Initialize the layer renderer

        Args:
            style_config: ChartStyleConfig class (or compatible) with layout settings
        """
        self.style_config = style_config
        self.axis = style_config.get_axis_config()
        self.grid = style_config.get_grid_config()
        self.entry_line = style_config.get_entry_line_config()
        self.area_fill = style_config.get_area_fill_config()
        self.colors = style_config.get_colors()
        self.strokes = [StrokeLayer.from_dict(s) for s in style_config.get_neon_strokes()]

    def render(self, surface: ChartSurface, chart_data: ChartData, config: ChartConfig):
        """
        Draw every chart layer onto the surface.

        Args:
            surface: Surface sized to the config's logical dimensions
            chart_data: Points, entry price and sentiment
            config: Dimensions, padding, style and axis visibility
        """
        # Logical dimensions, dpr scaling is handled by the surface
        width = config.dimensions.width
        height = config.dimensions.height
        padding = config.padding
        style = config.style

        self._draw_background(surface, style)
        self._draw_grid(surface, width, height, padding, style)

        if not chart_data.points:
            logger.warning("No points to render, drew background and grid only")
            return

        scaled = scale_points_to_canvas(
            chart_data.points,
            canvas_width=width,
            canvas_height=height,
            padding=padding,
            margin_ratio=self.grid['y_margin_ratio'],
        )

        if config.include_axes:
            self._draw_y_axis(surface, scaled, padding, width)
            self._draw_x_axis(surface, chart_data.points, scaled, padding, width, height)

        self._draw_entry_line(surface, chart_data.entry_price, scaled, padding, width, style)
        self._draw_area_fill(surface, scaled.coordinates, padding, height, style.line_color)
        self._draw_chart_line(surface, scaled.coordinates, style.line_color)

        logger.info(f"Rendered chart with {len(chart_data.points)} points, "
                    f"bullish: {chart_data.is_bullish}")

    def _draw_background(self, surface: ChartSurface, style: ChartStyle):
        """Vertical gradient over the full canvas"""
        surface.fill_gradient(
            hex_to_rgba(style.background_gradient_start, 1.0),
            hex_to_rgba(style.background_gradient_end, 1.0),
            zorder=LAYER_ZORDER['background'],
            gid='background',
        )

    def _draw_grid(self, surface: ChartSurface, width: int, height: int,
                   padding: Padding, style: ChartStyle):
        """Horizontal and vertical grid lines on half-pixel offsets"""
        inner_width = width - padding.left - padding.right
        inner_height = height - padding.top - padding.bottom
        horizontal = self.grid['horizontal_lines']
        vertical = self.grid['vertical_lines']

        ys = [round(padding.top + (i / horizontal) * inner_height) + 0.5 for i in range(horizontal + 1)]
        xs = [round(padding.left + (i / vertical) * inner_width) + 0.5 for i in range(vertical + 1)]

        common = dict(colors=style.grid_color, linewidths=self.grid['line_width'],
                      zorder=LAYER_ZORDER['grid'])
        surface.ax.hlines(ys, padding.left, width - padding.right, **common).set_gid('grid')
        surface.ax.vlines(xs, padding.top, height - padding.bottom, **common).set_gid('grid')

        logger.debug(f"Drew {len(ys)} horizontal and {len(xs)} vertical grid lines")

    def _label_style(self, width: int) -> Dict[str, Any]:
        return dict(
            fontsize=width * self.axis['font_size_ratio'],
            family=self.axis['font_family'],
            color=self.colors['axis_labels'],
        )

    def _draw_y_axis(self, surface: ChartSurface, scaled: ScaledSeries,
                     padding: Padding, width: int):
        """Price labels and tick marks on the right inner edge"""
        tick_count = self.axis['y_ticks']
        axis_x = width - padding.right
        label_x = axis_x + self.axis['label_padding']
        label_style = self._label_style(width)
        zorder = LAYER_ZORDER['y_axis']

        tick_ys: List[float] = []
        for i in range(tick_count + 1):
            value = scaled.value_min + (scaled.value_max - scaled.value_min) * (i / tick_count)
            y = scaled.y_scale(value)
            tick_ys.append(y)
            surface.ax.text(label_x, y, format_price_label(value), ha='left', va='center',
                            zorder=zorder, gid='y_label', **label_style)

        surface.ax.hlines(tick_ys, axis_x, axis_x + self.axis['tick_length'],
                          colors=self.colors['axis_labels'], linewidths=self.axis['line_width'],
                          zorder=zorder).set_gid('y_tick')

        logger.debug("Drew Y-axis price labels")

    def _draw_x_axis(self, surface: ChartSurface, points: Sequence[Point], scaled: ScaledSeries,
                     padding: Padding, width: int, height: int):
        """Time labels and tick marks on the bottom inner edge"""
        if not points:
            return

        tick_count = self.axis['x_ticks']
        first, last = points[0], points[-1]
        time_range = last.t - first.t
        axis_y = height - padding.bottom
        label_style = self._label_style(width)
        line_height = label_style['fontsize'] * self.axis['line_height']
        zorder = LAYER_ZORDER['x_axis']

        tick_xs: List[float] = []
        for i in range(tick_count + 1):
            timestamp = first.t + (time_range * i) / tick_count
            x = scaled.x_scale(timestamp)
            tick_xs.append(x)

            # Date + time ranges render as two lines
            for line_index, line in enumerate(format_time_label(timestamp, time_range).split('\n')):
                y = axis_y + self.axis['label_padding'] + line_index * line_height
                surface.ax.text(x, y, line, ha='center', va='top',
                                zorder=zorder, gid='x_label', **label_style)

        surface.ax.vlines(tick_xs, axis_y, axis_y + self.axis['tick_length'],
                          colors=self.colors['axis_labels'], linewidths=self.axis['line_width'],
                          zorder=zorder).set_gid('x_tick')

        logger.debug("Drew X-axis time labels")

    def _draw_entry_line(self, surface: ChartSurface, entry_price: float, scaled: ScaledSeries,
                         padding: Padding, width: int, style: ChartStyle):
        """Dashed horizontal line at the entry price"""
        y = scaled.y_scale(entry_price)
        line_width = self.entry_line['line_width']
        dash_on, dash_off = self.entry_line['dash']

        # Dash lengths are expressed in multiples of the line width
        surface.ax.plot(
            [padding.left, width - padding.right], [y, y],
            color=hex_to_rgba(style.entry_line_color, self.entry_line['alpha']),
            linewidth=line_width,
            linestyle=(0, (dash_on / line_width, dash_off / line_width)),
            solid_capstyle='butt',
            zorder=LAYER_ZORDER['entry_line'],
            gid='entry_line',
        )

        logger.debug(f"Drew entry line at price: {entry_price:.6g}")

    def _draw_area_fill(self, surface: ChartSurface, coordinates: Sequence[Coordinate],
                        padding: Padding, height: int, color: str):
        """Gradient fill between the series and the bottom of the plot"""
        if not coordinates:
            return

        bottom_y = height - padding.bottom
        first, last = coordinates[0], coordinates[-1]
        vertices = [(c.x, c.y) for c in coordinates]
        vertices.extend([(last.x, bottom_y), (first.x, bottom_y)])

        surface.fill_gradient(
            hex_to_rgba(color, self.area_fill['top_alpha']),
            hex_to_rgba(color, 0.0),
            zorder=LAYER_ZORDER['area_fill'],
            clip_vertices=vertices,
            steps=self.area_fill['gradient_steps'],
            gid='area_fill',
        )

        logger.debug("Drew area fill under chart line")

    def _draw_chart_line(self, surface: ChartSurface, coordinates: Sequence[Coordinate],
                         color: str, strokes: Optional[Sequence[StrokeLayer]] = None):
        """Main series line with neon glow, one pass per stroke layer"""
        if not coordinates:
            return

        strokes = self.strokes if strokes is None else strokes
        xs = [c.x for c in coordinates]
        ys = [c.y for c in coordinates]
        base_zorder = LAYER_ZORDER['glow']

        for index, stroke in enumerate(strokes):
            zorder = base_zorder + index * 0.1
            line_kwargs = dict(
                color=hex_to_rgba(color, stroke.alpha),
                linewidth=stroke.width_px,
                solid_capstyle='round',
                solid_joinstyle='round',
            )

            # Blurred copy underneath acts as the glow shadow
            if stroke.blur_px > 0:
                shadow, = surface.ax.plot(xs, ys, zorder=zorder, gid='glow_shadow', **line_kwargs)
                shadow.set_agg_filter(GaussianBlurFilter(stroke.blur_px, color))

            surface.ax.plot(xs, ys, zorder=zorder + 0.05, gid='glow', **line_kwargs)

        logger.debug(f"Drew chart line with {len(strokes)} neon stroke layers")
