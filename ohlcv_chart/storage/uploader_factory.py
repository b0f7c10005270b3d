"""
Uploader factory for creating the chart uploader based on configuration.
"""

import logging
from typing import Optional

from ..settings import Settings
from .uploader import UploaderInterface, S3Uploader, NullUploader

logger = logging.getLogger(__name__)


def create_uploader(settings: Settings, uploader_type: Optional[str] = None) -> UploaderInterface:
    """
    Create an uploader from uploader_type or the CHART_UPLOADER setting.

    Args:
        settings: Runtime settings
        uploader_type: 's3' or 'null'. If None, uses settings.uploader_type.

    Returns:
        UploaderInterface: Configured uploader instance
    """
    uploader_type = (uploader_type or settings.uploader_type).lower()
    public_base_url = settings.resolve_public_base_url()

    if uploader_type == 's3':
        if not settings.s3_bucket:
            logger.warning("AWS_S3_BUCKET not set, falling back to mock uploader")
        else:
            try:
                return S3Uploader(
                    bucket_name=settings.s3_bucket,
                    public_base_url=public_base_url,
                    prefix=settings.s3_prefix,
                    aws_access_key_id=settings.aws_access_key_id,
                    aws_secret_access_key=settings.aws_secret_access_key,
                    region_name=settings.aws_region,
                    endpoint_url=settings.s3_endpoint_url,
                )
            except Exception as e:
                logger.error(f"Failed to create S3 uploader: {e}")
                logger.warning("Falling back to mock uploader")
    elif uploader_type != 'null':
        logger.warning(f"Unknown uploader '{uploader_type}', falling back to mock uploader")

    return NullUploader(public_base_url)
