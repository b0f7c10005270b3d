"""
Series data access: repositories returning ordered close-price points per token.
"""

from .repository import (
    SeriesRepository,
    InMemorySeriesRepository,
    CsvSeriesRepository,
    resolve_token_address,
    token_symbol,
)
from .repository_factory import create_series_repository

__all__ = [
    'SeriesRepository',
    'InMemorySeriesRepository',
    'CsvSeriesRepository',
    'resolve_token_address',
    'token_symbol',
    'create_series_repository',
]
