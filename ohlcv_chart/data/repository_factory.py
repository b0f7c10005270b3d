"""
Repository factory for creating the series repository based on configuration.
"""

import logging
from typing import Optional

from ..settings import Settings
from .repository import SeriesRepository, CsvSeriesRepository, InMemorySeriesRepository

logger = logging.getLogger(__name__)


def create_series_repository(settings: Settings, source_type: Optional[str] = None) -> SeriesRepository:
    """
    Create a series repository from source_type or the OHLCV_SOURCE setting.

    Args:
        settings: Runtime settings
        source_type: 'csv', 'dynamodb' or 'memory'. If None, uses settings.ohlcv_source.

    Returns:
        SeriesRepository: Configured repository instance
    """
    source_type = (source_type or settings.ohlcv_source).lower()

    if source_type == 'dynamodb':
        from .dynamodb_repository import DynamoDBSeriesRepository

        try:
            return DynamoDBSeriesRepository(
                table_name=settings.dynamodb_table,
                region_name=settings.aws_region,
                max_query_limit=settings.max_query_limit,
            )
        except Exception as e:
            logger.error(f"Failed to create DynamoDB repository: {e}")
            logger.warning("Falling back to CSV series repository")
            source_type = 'csv'

    if source_type == 'memory':
        logger.info("Using empty in-memory series repository")
        return InMemorySeriesRepository(max_query_limit=settings.max_query_limit)

    if source_type != 'csv':
        logger.warning(f"Unknown OHLCV source '{source_type}', falling back to CSV")

    return CsvSeriesRepository(settings.csv_dir, max_query_limit=settings.max_query_limit)
