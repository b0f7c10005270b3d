"""
Neon OHLCV chart renderer.

Turns stored close-price series into PNG charts with an entry-price line and a
sentiment-colored neon theme, then saves and optionally uploads them.
"""

from .exceptions import (
    ChartError,
    ValidationError,
    DataIntegrityError,
    ScalingError,
    RenderError,
    PersistenceError,
    UploadError,
    PipelineError,
)
from .models import ChartRequest, ChartResult, ChartMetrics, PipelineOptions, Point
from .pipeline import ChartPipeline, PipelineStage
from .settings import Settings

__version__ = '0.1.0'

__all__ = [
    'ChartError',
    'ValidationError',
    'DataIntegrityError',
    'ScalingError',
    'RenderError',
    'PersistenceError',
    'UploadError',
    'PipelineError',
    'ChartRequest',
    'ChartResult',
    'ChartMetrics',
    'PipelineOptions',
    'Point',
    'ChartPipeline',
    'PipelineStage',
    'Settings',
]
