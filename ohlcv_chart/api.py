"""
Request handlers for the chart service.

Transport agnostic: handlers take a decoded JSON payload and return a
(status code, body) tuple that any HTTP layer can serialize.
"""

import logging
from typing import Any, Dict, Tuple, Union

from .exceptions import PipelineError, ValidationError
from .models import ChartRequest
from .pipeline import ChartPipeline

logger = logging.getLogger(__name__)

Response = Tuple[int, Union[str, Dict[str, Any]]]


def handle_health() -> Response:
    return 200, "OK"


def handle_generate_chart(payload: Any, pipeline: ChartPipeline) -> Response:
    """
    Handle a chart generation request.

    Args:
        payload: Decoded JSON body
        pipeline: Configured pipeline to run the request on

    Returns:
        (400, error) for invalid input, (500, error) for pipeline failures,
        (200, result) with outputPath, uploadUrl and metrics on success
    """
    try:
        request = ChartRequest.from_payload(payload)
    except ValidationError as e:
        logger.warning(f"Rejected chart request: {e.message}")
        return 400, {'success': False, 'error': e.message}

    try:
        result = pipeline.generate(request)
    except PipelineError as e:
        return 500, {
            'success': False,
            'error': e.message,
            'stage': e.details.get('stage'),
        }

    body: Dict[str, Any] = {
        'success': True,
        'outputPath': result.local_path,
        'uploadUrl': result.upload.url if result.upload and result.upload.success else None,
        'metrics': result.metrics.to_dict(),
    }
    if result.upload_failed:
        body['uploadError'] = result.upload.error

    return 200, body
