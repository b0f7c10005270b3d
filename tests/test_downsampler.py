"""Tests for min-max downsampling."""

import math

import pytest

from ohlcv_chart.chart import calculate_optimal_downsample_width, create_default_chart_config, downsample_min_max
from ohlcv_chart.models import Point


def test_short_series_is_returned_unchanged():
    """Series within 2 * target width come back as the same object"""
    points = [Point(t=0, y=10), Point(t=1000, y=20)]

    result = downsample_min_max(points, 100)

    assert result is points


def test_identity_at_exact_budget(make_series):
    points = make_series(200)
    assert downsample_min_max(points, 100) is points


def test_empty_series():
    assert list(downsample_min_max([], 10)) == []


def test_extremes_are_preserved():
    """1000 points spanning 1..100 keep both extremes"""
    points = [Point(t=i * 1000, y=1 + (i * 37) % 100) for i in range(1000)]

    result = downsample_min_max(points, 10)

    assert 2 <= len(result) <= 200
    assert min(p.y for p in result) == 1
    assert max(p.y for p in result) == 100


def test_output_bounded_by_bucket_count(make_series):
    points = make_series(1003)
    target = 50

    result = downsample_min_max(points, target)
    buckets = math.ceil(len(points) / math.ceil(len(points) / target))

    assert len(result) <= 2 * buckets
    assert len(result) <= 2 * target


def test_output_keeps_time_order(make_series):
    points = make_series(5000, amplitude=3.0)

    result = downsample_min_max(points, 40)

    timestamps = [p.t for p in result]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps), "Points must not be duplicated"
    assert all(p in points for p in result)


def test_flat_bucket_emits_single_point():
    """When min and max are the same point it is emitted once"""
    points = [Point(t=i, y=5.0) for i in range(50)]

    result = downsample_min_max(points, 5)

    # Ties keep the first occurrence, so each bucket yields its first point
    assert [p.t for p in result] == [0, 10, 20, 30, 40]


def test_max_before_min_is_emitted_in_time_order():
    points = [Point(t=i, y=y) for i, y in enumerate([9, 5, 1, 3] * 10)]

    result = downsample_min_max(points, 10)

    assert len(result) == 20
    assert result[0] == Point(t=0, y=9)
    assert result[1] == Point(t=2, y=1)


def test_last_bucket_may_be_shorter():
    points = [Point(t=i, y=float(i % 7)) for i in range(25)]

    result = downsample_min_max(points, 4)

    # Buckets of 7: the last one holds points 21..24
    assert result[-1].t >= 21


@pytest.mark.parametrize('target', [0, -3])
def test_rejects_non_positive_target(make_series, target):
    with pytest.raises(ValueError):
        downsample_min_max(make_series(10), target)


def test_optimal_width_scales_with_pixel_ratio():
    assert calculate_optimal_downsample_width(800, 1) == 1600
    assert calculate_optimal_downsample_width(800, 1.5) == 2400
    assert calculate_optimal_downsample_width(300, 2, multiplier=1) == 600


def test_default_config_budget_uses_logical_width():
    config = create_default_chart_config(400, 200, 2.0)

    assert config.downsample_width == 800
