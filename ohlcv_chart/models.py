"""
Chart Data Types

Defines the value objects passed between the pipeline stages: series points,
canvas geometry, styling, render input and the resulting metrics.
"""

import numbers
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Any, Optional, Sequence, Tuple

from .chart_config import ChartStyleConfig
from .exceptions import ValidationError


@dataclass(frozen=True)
class Point:
    """A single series sample: timestamp in milliseconds and value (close price)"""
    t: int
    y: float


@dataclass(frozen=True)
class Coordinate:
    """Pixel-space position of a point after scaling"""
    x: float
    y: float


@dataclass(frozen=True)
class Padding:
    """Insets of the inner plot rectangle, in logical pixels"""
    left: int
    right: int
    top: int
    bottom: int


@dataclass(frozen=True)
class Dimensions:
    """Logical canvas size and device pixel ratio"""
    width: int
    height: int
    dpr: float

    @property
    def physical_size(self) -> Tuple[int, int]:
        """Raster size in physical pixels"""
        return round(self.width * self.dpr), round(self.height * self.dpr)


@dataclass(frozen=True)
class ChartStyle:
    """Colors derived from market sentiment"""
    line_color: str
    background_gradient_start: str
    background_gradient_end: str
    grid_color: str
    entry_line_color: str


@dataclass(frozen=True)
class StrokeLayer:
    """One pass of the neon glow line"""
    width_px: float
    alpha: float
    blur_px: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'StrokeLayer':
        return cls(width_px=data['width'], alpha=data['alpha'], blur_px=data.get('blur', 0.0))


@dataclass(frozen=True)
class ChartData:
    """Complete render input besides geometry"""
    points: Tuple[Point, ...]
    entry_price: float
    is_bullish: bool

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, 'points', tuple(self.points))


@dataclass(frozen=True)
class ChartConfig:
    """Geometry and styling for a single render"""
    dimensions: Dimensions
    padding: Padding
    style: ChartStyle
    downsample_width: int
    include_axes: bool = True


@dataclass(frozen=True)
class ChartMetrics:
    """Summary of a finished render"""
    points_raw: int
    points_downsampled: int
    is_bullish: bool
    entry_price: float
    last_price: float
    output_bytes: int
    output_path: str
    size: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a JSON-friendly dictionary"""
        return {
            'pointsRaw': self.points_raw,
            'pointsDownsampled': self.points_downsampled,
            'isBullish': self.is_bullish,
            'entryPrice': self.entry_price,
            'lastPrice': self.last_price,
            'outputBytes': self.output_bytes,
            'outputPath': self.output_path,
            'size': self.size,
        }


@dataclass(frozen=True)
class SeriesStats:
    """Stored point count and most recent timestamp for a token"""
    count: int
    latest_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an object storage upload"""
    success: bool
    url: Optional[str] = None
    error: Optional[str] = None
    key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class PipelineOptions:
    """Which optional steps a chart request runs"""
    include_axes: bool = True
    persist_locally: bool = True
    persist_remotely: bool = False


@dataclass(frozen=True)
class ChartResult:
    """Everything produced by a successful pipeline run"""
    metrics: ChartMetrics
    image_bytes: bytes = field(repr=False, default=b'')
    local_path: Optional[str] = None
    upload: Optional[UploadResult] = None

    @property
    def upload_failed(self) -> bool:
        return self.upload is not None and not self.upload.success


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class ChartRequest:
    """
    A chart generation request as received from a caller (CLI or HTTP).

    Attributes:
        token_address: Token identifier understood by the series repository
        entry_price: Price of the user's position, drawn as the entry line
        is_bullish: Position direction, selects the color theme
        period_hours: Time window ending at the latest stored point
        width, height, dpr: Canvas geometry
    """
    token_address: str
    entry_price: float
    is_bullish: bool
    period_hours: float = ChartStyleConfig.CHART_DEFAULTS['period_hours']
    width: int = ChartStyleConfig.CHART_DEFAULTS['width']
    height: int = ChartStyleConfig.CHART_DEFAULTS['height']
    dpr: float = ChartStyleConfig.CHART_DEFAULTS['dpr']

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(width=self.width, height=self.height, dpr=self.dpr)

    @classmethod
    def from_payload(cls, payload: Any) -> 'ChartRequest':
        """
        Build a request from a decoded JSON payload.

        Args:
            payload: Dict with tokenAddress, entryPrice, isBullish and optional
                     periodHours, width, height, dpr

        Returns:
            Validated ChartRequest with defaults filled in

        Raises:
            ValidationError: If a required field is missing or a field has the wrong type
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        token_address = payload.get('tokenAddress')
        if not token_address or not isinstance(token_address, str):
            raise ValidationError("tokenAddress is required")

        entry_price = payload.get('entryPrice')
        if not _is_number(entry_price):
            raise ValidationError("entryPrice is required and must be a number")

        is_bullish = payload.get('isBullish')
        if not isinstance(is_bullish, bool):
            raise ValidationError("isBullish is required and must be a boolean")

        defaults = ChartStyleConfig.get_defaults()
        optional = {}
        for key, field_name in (('periodHours', 'period_hours'), ('width', 'width'),
                                ('height', 'height'), ('dpr', 'dpr')):
            value = payload.get(key)
            if value is None:
                optional[field_name] = defaults[field_name]
                continue
            if not _is_number(value) or value <= 0:
                raise ValidationError(f"{key} must be a positive number", {key: value})
            if field_name in ('width', 'height') and int(value) < 1:
                raise ValidationError(f"{key} must be at least 1 pixel", {key: value})
            optional[field_name] = value

        return cls(
            token_address=token_address,
            entry_price=float(entry_price),
            is_bullish=is_bullish,
            period_hours=optional['period_hours'],
            width=int(optional['width']),
            height=int(optional['height']),
            dpr=float(optional['dpr']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tokenAddress': self.token_address,
            'entryPrice': self.entry_price,
            'isBullish': self.is_bullish,
            'periodHours': self.period_hours,
            'width': self.width,
            'height': self.height,
            'dpr': self.dpr,
        }


def points_from_pairs(pairs: Sequence[Tuple[int, float]]) -> Tuple[Point, ...]:
    """Build points from (timestamp_ms, value) pairs"""
    return tuple(Point(t=int(t), y=float(y)) for t, y in pairs)
