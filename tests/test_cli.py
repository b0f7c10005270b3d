"""Tests for the gen_chart command line script."""

import random

import pandas as pd
from botocore.exceptions import ClientError
import pytest

import gen_chart
from ohlcv_chart.chart_config import ChartStyleConfig
from ohlcv_chart.data import InMemorySeriesRepository
from ohlcv_chart.models import Point

JUP = ChartStyleConfig.KNOWN_TOKENS['JUP']


@pytest.fixture
def csv_env(clean_env, tmp_path):
    """CSV data source with 200 minute rows for JUP"""
    csv_dir = tmp_path / 'ohlcv'
    csv_dir.mkdir()
    rows = {
        'timestamp': [1_700_000_000 + i * 60 for i in range(200)],
        'open': [1.0] * 200,
        'high': [1.1] * 200,
        'low': [0.9] * 200,
        'close': [1.0 + (i % 20) / 100 for i in range(200)],
        'volume': [100] * 200,
    }
    pd.DataFrame(rows).to_csv(csv_dir / f"{JUP}.csv", index=False)
    clean_env.chdir(tmp_path)
    return tmp_path


def test_mock_entry_price_within_range():
    points = [Point(t=i, y=float(y)) for i, y in enumerate([10, 20, 15, 18])]

    for seed in range(20):
        entry_price, is_bullish = gen_chart.calculate_mock_entry_price(points, random.Random(seed))
        assert 13.0 <= entry_price <= 17.0
        assert is_bullish == (18 > entry_price)


def test_mock_entry_price_is_reproducible_with_seed():
    points = [Point(t=i, y=float(i)) for i in range(10)]

    first = gen_chart.calculate_mock_entry_price(points, random.Random(42))
    second = gen_chart.calculate_mock_entry_price(points, random.Random(42))

    assert first == second


def test_mock_entry_price_empty_series():
    assert gen_chart.calculate_mock_entry_price([]) == (1.0, True)


def test_lists_tokens_without_arguments(csv_env, capsys):
    exit_code = gen_chart.main(['--source', 'csv'])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert 'JUP' in output
    assert '200 points' in output
    assert 'Total: 1 tokens available' in output


def test_generates_chart(csv_env):
    exit_code = gen_chart.main(['jup', '--seed', '3', '--width', '300', '--height', '150',
                                '--dpr', '1', '--source', 'csv'])

    assert exit_code == 0
    assert (csv_env / 'data' / 'chart-jup.png').exists()


def test_generates_chart_with_explicit_options(csv_env):
    output = csv_env / 'custom' / 'out.png'

    exit_code = gen_chart.main(['JUP', '2', '--entry-price', '1.05', '--bearish', '--no-axes',
                                '--width', '300', '--height', '150', '--output', str(output)])

    assert exit_code == 0
    assert output.exists()


def test_unknown_token_fails(csv_env, capsys):
    exit_code = gen_chart.main(['DOGE', '--source', 'csv'])

    assert exit_code == 1
    assert 'Unknown token: DOGE' in capsys.readouterr().out


def test_insufficient_data_fails(csv_env, clean_env):
    clean_env.setenv('CHART_MIN_DATA_POINTS', '500')

    assert gen_chart.main(['JUP', '--entry-price', '1.0', '--bullish',
                           '--width', '300', '--height', '150']) == 1


@pytest.mark.parametrize('hours', ['0', '-6'])
def test_non_positive_hours_fail(csv_env, capsys, hours):
    assert gen_chart.main(['JUP', hours, '--source', 'csv']) == 1
    assert 'Period must be a positive number of hours' in capsys.readouterr().out


class ThrottledRepository(InMemorySeriesRepository):
    def fetch_series(self, token_id, window_hours, interval_minutes=1):
        raise ClientError({'Error': {'Code': 'ProvisionedThroughputExceededException',
                                     'Message': 'Rate exceeded'}}, 'Query')


def test_backend_error_during_fetch_fails_cleanly(clean_env, capsys):
    clean_env.setattr(gen_chart, 'create_series_repository',
                      lambda settings: ThrottledRepository())

    exit_code = gen_chart.main(['JUP', '--source', 'memory'])

    assert exit_code == 1
    assert 'Failed to fetch OHLCV data' in capsys.readouterr().out
