"""Tests for the transport agnostic request handlers."""

import pytest

from ohlcv_chart.api import handle_generate_chart, handle_health
from ohlcv_chart.data import InMemorySeriesRepository
from ohlcv_chart.models import PipelineOptions, UploadResult
from ohlcv_chart.pipeline import ChartPipeline
from ohlcv_chart.storage import UploaderInterface


class FailingUploader(UploaderInterface):
    def get_public_url(self, key):
        return f"https://cdn.example.com/{key}"

    def upload(self, data, key, content_type='image/png'):
        return UploadResult(success=False, error='bucket unavailable', key=key)


@pytest.fixture
def pipeline(make_series, settings):
    repository = InMemorySeriesRepository({'tok': make_series(150)})
    return ChartPipeline(repository, options=PipelineOptions(persist_locally=False), settings=settings)


def _payload(**overrides):
    payload = {'tokenAddress': 'tok', 'entryPrice': 1.0, 'isBullish': True,
               'width': 300, 'height': 150, 'dpr': 1}
    payload.update(overrides)
    return payload


def test_health():
    assert handle_health() == (200, 'OK')


def test_generate_success(pipeline):
    status, body = handle_generate_chart(_payload(), pipeline)

    assert status == 200
    assert body['success'] is True
    assert body['outputPath'] is None
    assert body['uploadUrl'] is None
    assert body['metrics']['pointsRaw'] == 150
    assert body['metrics']['size'] == '300x150@1x'


def test_invalid_payload_is_bad_request(pipeline):
    status, body = handle_generate_chart(_payload(isBullish='true'), pipeline)

    assert status == 400
    assert body['success'] is False
    assert 'isBullish' in body['error']


@pytest.mark.parametrize('field', ['width', 'height'])
def test_sub_pixel_size_is_bad_request(pipeline, field):
    status, body = handle_generate_chart(_payload(**{field: 0.5}), pipeline)

    assert status == 400
    assert body['success'] is False
    assert field in body['error']


def test_pipeline_failure_is_server_error(pipeline):
    status, body = handle_generate_chart(_payload(tokenAddress='unknown'), pipeline)

    assert status == 500
    assert body['success'] is False
    assert body['stage'] == 'validating'


def test_failed_upload_still_succeeds(make_series, settings):
    repository = InMemorySeriesRepository({'tok': make_series(150)})
    pipeline = ChartPipeline(repository, uploader=FailingUploader(),
                             options=PipelineOptions(persist_locally=False, persist_remotely=True),
                             settings=settings)

    status, body = handle_generate_chart(_payload(), pipeline)

    assert status == 200
    assert body['uploadUrl'] is None
    assert body['uploadError'] == 'bucket unavailable'
    assert body['metrics']['outputPath'] == 'memory'
