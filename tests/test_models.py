"""Tests for request parsing and value objects."""

import pytest

from ohlcv_chart.exceptions import ValidationError
from ohlcv_chart.models import ChartData, ChartRequest, Dimensions, Point, UploadResult, points_from_pairs


def test_request_defaults():
    request = ChartRequest.from_payload({
        'tokenAddress': 'abc123',
        'entryPrice': 0.5,
        'isBullish': True,
    })

    assert request.token_address == 'abc123'
    assert request.period_hours == 24
    assert request.dimensions == Dimensions(800, 360, 1.5)
    assert request.dimensions.physical_size == (1200, 540)


def test_request_with_optional_fields():
    request = ChartRequest.from_payload({
        'tokenAddress': 'abc123',
        'entryPrice': 2,
        'isBullish': False,
        'periodHours': 12,
        'width': 400,
        'height': 200,
        'dpr': 2,
    })

    assert request.entry_price == 2.0
    assert request.is_bullish is False
    assert request.to_dict()['periodHours'] == 12
    assert request.dimensions == Dimensions(400, 200, 2.0)


@pytest.mark.parametrize('payload, message', [
    ({'entryPrice': 1.0, 'isBullish': True}, 'tokenAddress is required'),
    ({'tokenAddress': '', 'entryPrice': 1.0, 'isBullish': True}, 'tokenAddress is required'),
    ({'tokenAddress': 'abc', 'isBullish': True}, 'entryPrice is required'),
    ({'tokenAddress': 'abc', 'entryPrice': True, 'isBullish': True}, 'entryPrice is required'),
    ({'tokenAddress': 'abc', 'entryPrice': '1.0', 'isBullish': True}, 'entryPrice is required'),
    ({'tokenAddress': 'abc', 'entryPrice': 1.0, 'isBullish': 'yes'}, 'isBullish is required'),
    ({'tokenAddress': 'abc', 'entryPrice': 1.0, 'isBullish': True, 'width': 0}, 'width must be a positive number'),
    ({'tokenAddress': 'abc', 'entryPrice': 1.0, 'isBullish': True, 'dpr': -1}, 'dpr must be a positive number'),
    ({'tokenAddress': 'abc', 'entryPrice': 1.0, 'isBullish': True, 'width': 0.5}, 'width must be at least 1 pixel'),
    ({'tokenAddress': 'abc', 'entryPrice': 1.0, 'isBullish': True, 'height': 0.9}, 'height must be at least 1 pixel'),
])
def test_request_validation_errors(payload, message):
    with pytest.raises(ValidationError) as exc_info:
        ChartRequest.from_payload(payload)

    assert message in exc_info.value.message


def test_request_must_be_an_object():
    with pytest.raises(ValidationError):
        ChartRequest.from_payload(['tokenAddress'])


def test_chart_data_stores_points_as_tuple():
    data = ChartData(points=[Point(0, 1.0), Point(1, 2.0)], entry_price=1.5, is_bullish=True)

    assert isinstance(data.points, tuple)
    assert data.points == points_from_pairs([(0, 1.0), (1, 2.0)])


def test_upload_result_to_dict_drops_empty_fields():
    assert UploadResult(success=True, url='https://cdn/x.png').to_dict() == {
        'success': True,
        'url': 'https://cdn/x.png',
    }
    assert UploadResult(success=False, error='x').to_dict() == {'success': False, 'error': 'x'}
