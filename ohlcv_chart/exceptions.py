"""
Custom exceptions for the chart generation pipeline.

Each pipeline failure maps to one of these types so callers can tell bad
input apart from rendering or persistence problems.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ChartError(Exception):
    """
    Base exception for all chart generation errors.

    Attributes:
        message: Human-readable error description
        details: Additional context dictionary
        timestamp: When the error occurred (UTC)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(ChartError):
    """Raised for malformed requests or tokens without enough data points."""
    pass


class DataIntegrityError(ChartError):
    """
    Raised when fetched series data cannot be charted.

    Common scenarios:
        - Empty series returned by the data source
        - NaN, infinite or negative prices
        - Timestamps that are duplicated or out of order
    """

    def __init__(self, message: str, errors: Optional[list] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.errors = errors or []


class ScalingError(ChartError):
    """Raised when a series cannot be mapped to canvas coordinates."""
    pass


class RenderError(ChartError):
    """Raised when drawing the chart or exporting the raster fails."""
    pass


class PersistenceError(ChartError):
    """Raised when writing the chart to the local filesystem fails."""
    pass


class UploadError(ChartError):
    """
    Raised inside uploaders when an object storage write fails.

    The pipeline never lets this escape: it is turned into a failed
    UploadResult so a good render is still returned.
    """
    pass


class PipelineError(ChartError):
    """
    Raised by the pipeline orchestrator, wrapping the root cause with the
    stage at which the request failed.
    """

    def __init__(self, stage: Any, message: str, cause: Optional[BaseException] = None):
        stage_name = getattr(stage, 'value', stage)
        super().__init__(f"Chart generation failed at {stage_name}: {message}",
                         {'stage': stage_name})
        self.stage = stage
        self.cause = cause
