#!/usr/bin/env python3
"""
Runtime Settings

Centralizes environment variable handling for data sources, uploads and
local output. Entry points call load_dotenv() before building Settings.
"""

import os
import logging
from typing import Optional

from .chart_config import ChartStyleConfig

logger = logging.getLogger(__name__)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


class Settings:
    """Centralized configuration for the chart pipeline"""

    def __init__(self,
                 ohlcv_source: Optional[str] = None,
                 uploader_type: Optional[str] = None,
                 output_dir: Optional[str] = None):
        """
        Initialize settings from the environment.

        Args:
            ohlcv_source: Override OHLCV_SOURCE ('csv', 'dynamodb' or 'memory')
            uploader_type: Override CHART_UPLOADER ('s3' or 'null')
            output_dir: Override CHART_OUTPUT_DIR
        """
        defaults = ChartStyleConfig.get_defaults()

        # Data source
        self.ohlcv_source = (ohlcv_source or os.getenv('OHLCV_SOURCE', 'csv')).lower()
        self.csv_dir = os.getenv('OHLCV_CSV_DIR', './ohlcv')
        self.dynamodb_table = os.getenv('OHLCV_DYNAMODB_TABLE', 'token_ohlcv')
        self.aws_region = os.getenv('AWS_REGION', 'us-east-1')

        # Upload configuration
        self.uploader_type = (uploader_type or os.getenv('CHART_UPLOADER', 's3')).lower()
        self.s3_bucket = os.getenv('AWS_S3_BUCKET')
        self.s3_prefix = os.getenv('AWS_S3_PREFIX', '')
        self.s3_endpoint_url = os.getenv('S3_ENDPOINT_URL')
        self.aws_access_key_id = os.getenv('AWS_ACCESS_KEY_ID')
        self.aws_secret_access_key = os.getenv('AWS_SECRET_ACCESS_KEY')
        self.public_base_url = os.getenv('CHART_PUBLIC_BASE_URL', '').rstrip('/') or None

        # Pipeline
        self.output_dir = output_dir or os.getenv('CHART_OUTPUT_DIR', defaults['output_dir'])
        self.min_data_points = _get_int('CHART_MIN_DATA_POINTS', defaults['min_data_points'])
        self.interval_minutes = _get_int('CHART_INTERVAL_MINUTES', defaults['interval_minutes'])
        self.max_query_limit = defaults['max_query_limit']

        logger.debug(f"Settings: source={self.ohlcv_source}, uploader={self.uploader_type}, "
                     f"output_dir={self.output_dir}, min_points={self.min_data_points}")

    def resolve_public_base_url(self) -> str:
        """Public URL prefix for uploaded objects"""
        if self.public_base_url:
            return self.public_base_url
        if self.s3_bucket:
            return f"https://{self.s3_bucket}.s3.{self.aws_region}.amazonaws.com"
        return 'https://charts.invalid'
