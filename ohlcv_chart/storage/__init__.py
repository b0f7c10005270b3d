"""
Chart output: PNG optimization, local files and object storage uploads.
"""

from .image_optimizer import ImageOptimizer
from .uploader import UploaderInterface, S3Uploader, NullUploader, generate_chart_key
from .uploader_factory import create_uploader
from .file_operations import ensure_output_directory, write_image_file, generate_chart_filename

__all__ = [
    'ImageOptimizer',
    'UploaderInterface',
    'S3Uploader',
    'NullUploader',
    'generate_chart_key',
    'create_uploader',
    'ensure_output_directory',
    'write_image_file',
    'generate_chart_filename',
]
