"""
Object storage uploaders for rendered charts.
Provides a unified interface for S3-compatible storage and a logging-only mock.
"""

import logging
import random
import string
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError, BotoCoreError

from ..chart_config import ChartStyleConfig
from ..exceptions import UploadError
from ..models import UploadResult
from .file_operations import filename_timestamp

logger = logging.getLogger(__name__)

KEY_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_chart_key(symbol: str, window_hours: float,
                       now: Optional[datetime] = None,
                       rng: Optional[random.Random] = None) -> str:
    """
    Generate a unique object key for a chart upload.

    Returns:
        Key like charts/jup-24h-2026-10-19T14-30-00-123Z-k3x9qa.png
    """
    rng = rng or random
    suffix = ''.join(rng.choice(KEY_SUFFIX_ALPHABET) for _ in range(6))
    return f"charts/{symbol.lower()}-{window_hours:g}h-{filename_timestamp(now)}-{suffix}.png"


class UploaderInterface(ABC):
    """Abstract base class for chart uploaders."""

    @abstractmethod
    def upload(self, data: bytes, key: str, content_type: str = 'image/png') -> UploadResult:
        """Upload data under key, returning the public URL or the failure."""
        pass

    @abstractmethod
    def get_public_url(self, key: str) -> str:
        """Public URL an object under key is served from."""
        pass


class S3Uploader(UploaderInterface):
    """S3 (or S3-compatible, e.g. R2) uploader."""

    def __init__(self, bucket_name: str, public_base_url: str, prefix: str = "",
                 aws_access_key_id: Optional[str] = None,
                 aws_secret_access_key: Optional[str] = None,
                 region_name: str = 'us-east-1',
                 endpoint_url: Optional[str] = None,
                 client: Any = None):
        """
        Initialize S3 uploader.

        Args:
            bucket_name: Target bucket
            public_base_url: URL prefix objects are publicly served from
            prefix: Optional prefix for all keys (e.g., 'charts-prod/')
            aws_access_key_id: AWS access key (uses default chain if None)
            aws_secret_access_key: AWS secret key (uses default chain if None)
            region_name: AWS region
            endpoint_url: Custom endpoint for S3-compatible storage
            client: Pre-built S3 client (a new one is created if None)
        """
        self.bucket_name = bucket_name
        self.public_base_url = public_base_url.rstrip('/')
        self.prefix = prefix.strip('/') + '/' if prefix.strip('/') else ''
        self.cache_control = ChartStyleConfig.IMAGE['cache_control']

        if client is not None:
            self.s3_client = client
        else:
            session_kwargs = {'region_name': region_name}
            if aws_access_key_id and aws_secret_access_key:
                session_kwargs.update({
                    'aws_access_key_id': aws_access_key_id,
                    'aws_secret_access_key': aws_secret_access_key
                })
            session = boto3.Session(**session_kwargs)
            self.s3_client = session.client('s3', endpoint_url=endpoint_url)

        logger.info(f"S3Uploader initialized: s3://{bucket_name}/{self.prefix}")

    def _get_s3_key(self, key: str) -> str:
        """Convert key to S3 object key with prefix."""
        return f"{self.prefix}{key.strip('/')}"

    def get_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self._get_s3_key(key)}"

    def upload(self, data: bytes, key: str, content_type: str = 'image/png') -> UploadResult:
        s3_key = self._get_s3_key(key)
        try:
            self._put(data, s3_key, content_type)
        except UploadError as e:
            logger.error(f"Failed to upload to S3: {e}")
            return UploadResult(success=False, error=e.message, key=s3_key)

        url = self.get_public_url(key)
        logger.info(f"Successfully uploaded to S3: {s3_key} -> {url}")
        return UploadResult(success=True, url=url, key=s3_key)

    def _put(self, data: bytes, s3_key: str, content_type: str):
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=data,
                ContentType=content_type,
                CacheControl=self.cache_control,
            )
        except (ClientError, BotoCoreError) as e:
            raise UploadError(str(e), {'bucket': self.bucket_name, 'key': s3_key}) from e


class NullUploader(UploaderInterface):
    """Mock uploader that only logs; used when no bucket is configured."""

    def __init__(self, public_base_url: str = 'https://charts.invalid'):
        self.public_base_url = public_base_url.rstrip('/')

    def get_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key.strip('/')}"

    def upload(self, data: bytes, key: str, content_type: str = 'image/png') -> UploadResult:
        logger.info(f"Mock upload: {key} ({len(data)} bytes, {content_type})")
        return UploadResult(success=True, url=self.get_public_url(key), key=key)
