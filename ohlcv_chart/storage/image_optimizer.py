"""
PNG optimization using Pillow.
"""

import io
import logging
from typing import Optional, Dict, Any

from PIL import Image

from ..chart_config import ChartStyleConfig

logger = logging.getLogger(__name__)


class ImageOptimizer:
    """Re-encodes rendered PNG buffers with stronger compression"""

    def __init__(self, image_config: Optional[Dict[str, Any]] = None):
        self.image_config = image_config or ChartStyleConfig.get_image_config()

    def optimize(self, image_bytes: bytes) -> bytes:
        """
        Optimize a PNG buffer.

        Never raises: any decoding or encoding failure returns the input unchanged.

        Args:
            image_bytes: Raw PNG bytes

        Returns:
            Optimized PNG bytes, or the original bytes on failure
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                buffer = io.BytesIO()
                image.save(
                    buffer,
                    format=self.image_config['format'],
                    optimize=True,
                    compress_level=self.image_config['compress_level'],
                )
            optimized = buffer.getvalue()
        except Exception as e:
            logger.warning(f"Image optimization failed, using original: {e}")
            return image_bytes

        original_size = len(image_bytes)
        optimized_size = len(optimized)
        savings = (original_size - optimized_size) / original_size * 100 if original_size else 0.0
        logger.debug(f"Image optimized: {original_size} -> {optimized_size} bytes ({savings:.1f}% savings)")

        return optimized
