#!/usr/bin/env python3
"""
Chart Generation Pipeline

Orchestrates a chart request from data access to persisted image:
validate, fetch, downsample, configure, render, export, optimize and persist.
Collaborators (repository, uploader, optimizer) are injected by the caller.
"""

import logging
from enum import Enum
from typing import Optional

from .calculations import generate_chart_metrics, validate_point_data
from .chart import LayerRenderer, create_default_chart_config, downsample_min_max, setup_chart_surface
from .chart_config import ChartStyleConfig
from .data.repository import SeriesRepository, token_symbol
from .exceptions import ChartError, DataIntegrityError, PipelineError, RenderError, ValidationError
from .models import ChartData, ChartRequest, ChartResult, PipelineOptions, UploadResult
from .settings import Settings
from .storage.file_operations import generate_chart_filename, write_image_file
from .storage.image_optimizer import ImageOptimizer
from .storage.uploader import UploaderInterface, generate_chart_key

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Stages a chart request moves through, in order"""
    VALIDATING = 'validating'
    FETCHING = 'fetching'
    DOWNSAMPLING = 'downsampling'
    CONFIGURING = 'configuring'
    RENDERING = 'rendering'
    EXPORTING = 'exporting'
    OPTIMIZING = 'optimizing'
    PERSISTING = 'persisting'
    DONE = 'done'
    FAILED = 'failed'


class StageTracker:
    """Stage reached by a single generate() call"""

    def __init__(self):
        self.current = PipelineStage.VALIDATING

    def enter(self, stage: PipelineStage):
        self.current = stage
        logger.debug(f"Pipeline stage: {stage.value}")


class ChartPipeline:
    """
    Runs chart requests end to end.

    One pipeline can serve many requests. Each request renders on its own
    surface and tracks its own stage, so concurrent calls share no mutable
    state.
    """

    def __init__(self, repository: SeriesRepository,
                 uploader: Optional[UploaderInterface] = None,
                 optimizer: Optional[ImageOptimizer] = None,
                 options: Optional[PipelineOptions] = None,
                 settings: Optional[Settings] = None,
                 renderer: Optional[LayerRenderer] = None):
        """
        Initialize the pipeline

        Args:
            repository: Series data source
            uploader: Object storage uploader, required when persisting remotely
            optimizer: PNG optimizer (a default ImageOptimizer if None)
            options: Axis and persistence switches
            settings: Runtime settings (read from the environment if None)
            renderer: Layer renderer (a default LayerRenderer if None)
        """
        self.repository = repository
        self.uploader = uploader
        self.optimizer = optimizer or ImageOptimizer()
        self.options = options or PipelineOptions()
        self.settings = settings or Settings()
        self.renderer = renderer or LayerRenderer(ChartStyleConfig)
        # Outcome of the most recently finished request (DONE or FAILED)
        self.stage = PipelineStage.DONE

    def generate(self, request: ChartRequest, output_path: Optional[str] = None,
                 symbol: Optional[str] = None) -> ChartResult:
        """
        Generate a chart for a request.

        Args:
            request: Validated chart request
            output_path: Local file path (a timestamped name in the output dir if None)
            symbol: Display symbol used in generated file and object names

        Returns:
            ChartResult with metrics, image bytes, local path and upload outcome

        Raises:
            PipelineError: On any failure, chained to the underlying error
        """
        token = request.token_address
        symbol = symbol or token_symbol(token)
        logger.info(f"Starting chart generation for token: {token}")
        progress = StageTracker()

        try:
            progress.enter(PipelineStage.VALIDATING)
            stats = self.repository.count_and_latest(token)
            if stats.count < self.settings.min_data_points:
                raise ValidationError(
                    f"Token {token} has insufficient data ({stats.count} points, "
                    f"minimum {self.settings.min_data_points})",
                    {'count': stats.count},
                )
            logger.info(f"Token validation passed: {stats.count} data points")

            progress.enter(PipelineStage.FETCHING)
            raw_points = self.repository.fetch_series(
                token, request.period_hours, self.settings.interval_minutes)
            if not raw_points:
                raise DataIntegrityError(f"No data points found for token {token}")

            validation = validate_point_data(raw_points)
            if not validation.is_valid:
                raise DataIntegrityError(
                    f"Data integrity check failed: {'; '.join(validation.errors)}",
                    errors=validation.errors,
                )

            progress.enter(PipelineStage.DOWNSAMPLING)
            chart_config = create_default_chart_config(
                request.width, request.height, request.dpr,
                is_bullish=request.is_bullish,
                include_axes=self.options.include_axes,
            )
            points = downsample_min_max(raw_points, chart_config.downsample_width)
            logger.info(f"Downsampled {len(raw_points)} points to {len(points)} points")

            progress.enter(PipelineStage.CONFIGURING)
            chart_data = ChartData(points=points, entry_price=request.entry_price,
                                   is_bullish=request.is_bullish)

            image_bytes = self._render(chart_data, chart_config, progress)

            progress.enter(PipelineStage.OPTIMIZING)
            optimized = self.optimizer.optimize(image_bytes)

            progress.enter(PipelineStage.PERSISTING)
            local_path, upload = self._persist(optimized, request, output_path, symbol)

            if local_path:
                metrics_path = local_path
            elif upload is not None and upload.success:
                metrics_path = upload.url
            else:
                metrics_path = 'memory'

            metrics = generate_chart_metrics(
                raw_points=raw_points,
                downsampled_points=points,
                entry_price=request.entry_price,
                is_bullish=request.is_bullish,
                output_path=metrics_path,
                output_bytes=len(optimized),
                dimensions=chart_config.dimensions,
            )

            progress.enter(PipelineStage.DONE)
            self.stage = PipelineStage.DONE
            logger.info(f"Chart generated: {metrics.output_path} ({metrics.output_bytes} bytes)")
            return ChartResult(metrics=metrics, image_bytes=optimized,
                               local_path=local_path, upload=upload)

        except Exception as e:
            failed_stage = progress.current
            self.stage = PipelineStage.FAILED
            message = e.message if isinstance(e, ChartError) else str(e)
            logger.error(f"Chart generation failed at {failed_stage.value}: {message}")
            raise PipelineError(failed_stage, message, cause=e) from e

    def _render(self, chart_data: ChartData, chart_config, progress: StageTracker) -> bytes:
        """Draw all layers and export PNG bytes"""
        dimensions = chart_config.dimensions
        progress.enter(PipelineStage.RENDERING)
        try:
            with setup_chart_surface(dimensions.width, dimensions.height, dimensions.dpr) as surface:
                self.renderer.render(surface, chart_data, chart_config)

                progress.enter(PipelineStage.EXPORTING)
                image_bytes = surface.export_png()
        except ChartError:
            raise
        except Exception as e:
            raise RenderError(f"Failed to render chart: {e}") from e

        logger.info(f"Rendered {dimensions.width}x{dimensions.height}@{dimensions.dpr}x "
                    f"chart ({len(image_bytes)} bytes)")
        return image_bytes

    def _persist(self, image_bytes: bytes, request: ChartRequest,
                 output_path: Optional[str], symbol: str):
        """
        Write locally and upload, each when enabled.

        Both are attempted before a local write failure is raised.
        """
        local_path = None
        local_error = None
        upload = None

        if self.options.persist_locally:
            path = output_path or generate_chart_filename(symbol, self.settings.output_dir)
            try:
                local_path = str(write_image_file(path, image_bytes))
                logger.info(f"Saved chart to {local_path}")
            except ChartError as e:
                local_error = e

        if self.options.persist_remotely:
            upload = self._upload(image_bytes, request, symbol)

        if local_error is not None:
            raise local_error

        return local_path, upload

    def _upload(self, image_bytes: bytes, request: ChartRequest, symbol: str) -> UploadResult:
        """Upload the image; failures are returned, never raised"""
        if self.uploader is None:
            logger.error("Remote persistence requested but no uploader is configured")
            return UploadResult(success=False, error="No uploader configured")

        key = generate_chart_key(symbol, request.period_hours)
        content_type = ChartStyleConfig.IMAGE['content_type']
        try:
            result = self.uploader.upload(image_bytes, key, content_type)
        except Exception as e:
            logger.error(f"Upload failed for {key}: {e}")
            return UploadResult(success=False, error=str(e), key=key)

        if not result.success:
            logger.error(f"Upload failed for {key}: {result.error}")
        return result
