"""Shared fixtures for the chart tests."""

import math

import pytest

from ohlcv_chart.models import Point
from ohlcv_chart.settings import Settings

SETTINGS_ENV_VARS = [
    'OHLCV_SOURCE', 'OHLCV_CSV_DIR', 'OHLCV_DYNAMODB_TABLE', 'AWS_REGION',
    'CHART_UPLOADER', 'AWS_S3_BUCKET', 'AWS_S3_PREFIX', 'S3_ENDPOINT_URL',
    'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY', 'CHART_PUBLIC_BASE_URL',
    'CHART_OUTPUT_DIR', 'CHART_MIN_DATA_POINTS', 'CHART_INTERVAL_MINUTES',
]

START_MS = 1_700_000_000_000
MINUTE_MS = 60_000


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment with no chart settings and output under tmp_path"""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('CHART_OUTPUT_DIR', str(tmp_path / 'data'))
    monkeypatch.setenv('OHLCV_CSV_DIR', str(tmp_path / 'ohlcv'))
    return monkeypatch


@pytest.fixture
def settings(clean_env):
    return Settings()


@pytest.fixture
def make_series():
    """Factory for minute-spaced series oscillating around a base price"""
    def _make(count, base=1.0, amplitude=0.2, start_ms=START_MS, step_ms=MINUTE_MS):
        return [
            Point(t=start_ms + i * step_ms, y=base + amplitude * math.sin(i / 7))
            for i in range(count)
        ]
    return _make
