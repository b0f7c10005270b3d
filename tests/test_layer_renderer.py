"""Tests for layered chart rendering on the Agg surface."""

import io

import pytest
from PIL import Image

from ohlcv_chart.chart import (
    ChartSurface,
    LayerRenderer,
    create_default_chart_config,
    scale_points_to_canvas,
    setup_chart_surface,
)
from ohlcv_chart.chart.layer_renderer import LAYER_ZORDER
from ohlcv_chart.exceptions import RenderError
from ohlcv_chart.models import ChartData


def _gids(artists):
    return [artist.get_gid() for artist in artists]


def _render(points, entry_price=1.0, is_bullish=True, include_axes=True,
            width=400, height=200, dpr=1.0):
    config = create_default_chart_config(width, height, dpr, is_bullish=is_bullish,
                                         include_axes=include_axes)
    surface = setup_chart_surface(width, height, dpr)
    data = ChartData(points=points, entry_price=entry_price, is_bullish=is_bullish)
    LayerRenderer().render(surface, data, config)
    return surface, config


def test_surface_physical_size():
    surface = ChartSurface(800, 360, 1.5)

    assert surface.physical_size == (1200, 540)

    with Image.open(io.BytesIO(surface.export_png())) as image:
        assert image.size == (1200, 540)
        assert image.format == 'PNG'


def test_surface_rejects_invalid_dimensions():
    with pytest.raises(RenderError):
        ChartSurface(0, 360, 1.5)


def test_all_layers_are_drawn(make_series):
    surface, _ = _render(make_series(120))
    ax = surface.ax

    assert _gids(ax.images) == ['background', 'area_fill']
    assert _gids(ax.collections).count('grid') == 2
    assert 'y_tick' in _gids(ax.collections)
    assert 'x_tick' in _gids(ax.collections)
    assert _gids(ax.texts).count('y_label') == 6
    assert _gids(ax.texts).count('x_label') == 6

    line_gids = _gids(ax.lines)
    assert line_gids.count('entry_line') == 1
    assert line_gids.count('glow') == 3
    assert line_gids.count('glow_shadow') == 2


def test_layers_paint_in_fixed_order(make_series):
    surface, _ = _render(make_series(60))
    ax = surface.ax

    def zorder_of(gid):
        artists = [*ax.images, *ax.collections, *ax.lines, *ax.texts]
        return min(a.get_zorder() for a in artists if a.get_gid() == gid)

    order = ['background', 'grid', 'y_label', 'x_label', 'entry_line', 'area_fill', 'glow_shadow']
    zorders = [zorder_of(gid) for gid in order]
    assert zorders == sorted(zorders)
    assert zorder_of('background') == LAYER_ZORDER['background']


def test_entry_line_position(make_series):
    points = make_series(80, base=2.0)
    entry_price = 2.05
    surface, config = _render(points, entry_price=entry_price)

    scaled = scale_points_to_canvas(points, config.dimensions.width, config.dimensions.height,
                                    config.padding)
    entry_line = next(line for line in surface.ax.lines if line.get_gid() == 'entry_line')

    assert list(entry_line.get_ydata()) == pytest.approx([scaled.y_scale(entry_price)] * 2)
    assert list(entry_line.get_xdata()) == [config.padding.left,
                                            config.dimensions.width - config.padding.right]


def test_glow_strokes_follow_config(make_series):
    surface, config = _render(make_series(40), is_bullish=False)
    strokes = [line for line in surface.ax.lines if line.get_gid() == 'glow']

    assert [line.get_linewidth() for line in strokes] == [6, 4, 2]
    assert [round(line.get_alpha() or line.get_color()[3], 2) for line in strokes] == [0.25, 0.6, 1.0]
    assert all(line.get_agg_filter() is not None
               for line in surface.ax.lines if line.get_gid() == 'glow_shadow')


def test_without_axes_skips_labels(make_series):
    surface, _ = _render(make_series(50), include_axes=False)
    gids = _gids(surface.ax.texts) + _gids(surface.ax.collections)

    assert 'y_label' not in gids
    assert 'x_label' not in gids
    assert 'y_tick' not in gids
    assert _gids(surface.ax.lines).count('glow') == 3


def test_empty_points_draw_background_and_grid_only():
    surface, _ = _render([])

    assert _gids(surface.ax.images) == ['background']
    assert len(surface.ax.lines) == 0
    assert len(surface.ax.texts) == 0


def test_render_is_deterministic(make_series):
    """Same input renders to identical pixels"""
    points = make_series(150)

    first, _ = _render(points, entry_price=1.1)
    second, _ = _render(points, entry_price=1.1)

    assert first.rgba_bytes() == second.rgba_bytes()
    assert first.rgba_bytes() == first.rgba_bytes()


def test_sentiment_changes_pixels(make_series):
    points = make_series(150)

    bullish, _ = _render(points, is_bullish=True)
    bearish, _ = _render(points, is_bullish=False)

    assert bullish.rgba_bytes() != bearish.rgba_bytes()
