"""
Local file operations for rendered charts.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from ..chart_config import ChartStyleConfig
from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


def filename_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO timestamp with ':' and '.' replaced by '-', e.g. 2026-10-19T14-30-00-123Z"""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S') + f".{now.microsecond // 1000:03d}Z"
    return re.sub(r'[:.]', '-', iso)


def ensure_output_directory(output_path: Union[str, Path]) -> Path:
    """
    Create the parent directory of output_path if needed.

    Raises:
        PersistenceError: If the directory cannot be created
    """
    directory = Path(output_path).parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory: {e}")
        raise PersistenceError(f"Failed to create directory: {e}", {'path': str(directory)}) from e

    logger.debug(f"Ensured directory exists: {directory}")
    return directory


def write_image_file(output_path: Union[str, Path], image_bytes: bytes) -> Path:
    """
    Write image bytes to output_path, creating parent directories.

    Raises:
        PersistenceError: If the file cannot be written
    """
    path = Path(output_path)
    ensure_output_directory(path)

    try:
        path.write_bytes(image_bytes)
    except OSError as e:
        logger.error(f"Failed to write image file: {e}")
        raise PersistenceError(f"Failed to write image file: {e}", {'path': str(path)}) from e

    logger.debug(f"Successfully wrote {len(image_bytes)} bytes to {path}")
    return path


def generate_chart_filename(symbol: Optional[str] = None,
                            output_dir: Optional[Union[str, Path]] = None,
                            now: Optional[datetime] = None) -> str:
    """
    Generate a timestamped chart path.

    Args:
        symbol: Optional token symbol included in the name
        output_dir: Directory for the file (defaults to ./data)
        now: Timestamp to use (defaults to the current UTC time)

    Returns:
        Path like ./data/chart-jup-2026-10-19T14-30-00-123Z.png
    """
    output_dir = output_dir or ChartStyleConfig.CHART_DEFAULTS['output_dir']
    token = f"{symbol.lower()}-" if symbol else ''
    return str(Path(output_dir) / f"chart-{token}{filename_timestamp(now)}.png")
