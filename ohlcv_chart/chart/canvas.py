"""
Chart Surface

Thin wrapper around a matplotlib Figure that behaves like a 2D canvas:
drawing happens in logical pixels with the origin at the top-left, and the
whole surface is uniformly scaled by the device pixel ratio on export.

Each surface owns its own Figure (no pyplot state), so renders never share
mutable matplotlib objects.
"""

import io
import logging
import math
from typing import Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.path import Path

from ..exceptions import RenderError

logger = logging.getLogger(__name__)

# With dpi = 72 * dpr one point equals one logical pixel, so line widths and
# font sizes can be given in logical pixels directly.
POINTS_PER_INCH = 72

RGBA = Tuple[float, float, float, float]


def hex_to_rgba(color: str, alpha: float) -> RGBA:
    """Convert a matplotlib color (e.g. '#00ffa2') to an RGBA tuple with the given alpha"""
    return to_rgba(color, alpha)


def vertical_gradient(top: RGBA, bottom: RGBA, steps: int = 256) -> np.ndarray:
    """
    Build a (steps, 1, 4) RGBA image interpolating from top to bottom.

    Args:
        top: Color at the first row
        bottom: Color at the last row
        steps: Number of rows

    Returns:
        Float array suitable for Axes.imshow
    """
    ratios = np.linspace(0.0, 1.0, steps)[:, np.newaxis]
    top_arr = np.asarray(top, dtype=float)
    bottom_arr = np.asarray(bottom, dtype=float)
    gradient = top_arr + (bottom_arr - top_arr) * ratios
    return gradient[:, np.newaxis, :]


class GaussianBlurFilter:
    """
    agg_filter that replaces an artist with a gaussian-blurred copy of its
    alpha channel, painted in a single color (a canvas-style shadow).
    """

    def __init__(self, blur_px: float, color: str):
        """
        Args:
            blur_px: Blur radius in logical pixels (sigma is half of it)
            color: Shadow color
        """
        self.sigma = blur_px / 2.0
        self.rgb = to_rgba(color)[:3]

    def _kernel(self, sigma_px: float) -> np.ndarray:
        radius = max(1, int(math.ceil(sigma_px * 3)))
        offsets = np.arange(-radius, radius + 1, dtype=float)
        kernel = np.exp(-0.5 * (offsets / sigma_px) ** 2)
        return kernel / kernel.sum()

    def __call__(self, image: np.ndarray, dpi: float):
        sigma_px = self.sigma * dpi / POINTS_PER_INCH
        if sigma_px <= 0:
            return image, 0, 0

        kernel = self._kernel(sigma_px)
        pad = len(kernel) // 2
        padded = np.pad(image, [(pad, pad), (pad, pad), (0, 0)], 'constant')

        alpha = padded[:, :, 3]
        alpha = np.apply_along_axis(np.convolve, 0, alpha, kernel, 'same')
        alpha = np.apply_along_axis(np.convolve, 1, alpha, kernel, 'same')

        blurred = np.empty_like(padded)
        blurred[:, :, :3] = self.rgb
        blurred[:, :, 3] = np.clip(alpha, 0.0, 1.0)
        return blurred, -pad, -pad


class ChartSurface:
    """Rendering surface sized in logical pixels and scaled by dpr"""

    def __init__(self, width: int, height: int, dpr: float):
        """
        Create a surface of width x height logical pixels.

        Args:
            width: Logical width
            height: Logical height
            dpr: Device pixel ratio, the exported raster is width*dpr x height*dpr
        """
        if width <= 0 or height <= 0 or dpr <= 0:
            raise RenderError("Surface dimensions must be positive",
                              {'width': width, 'height': height, 'dpr': dpr})

        self.width = width
        self.height = height
        self.dpr = dpr
        self.dpi = POINTS_PER_INCH * dpr

        physical_width = round(width * dpr)
        physical_height = round(height * dpr)

        # Agg truncates the figure size to whole pixels, nudge so the rounding survives
        self.figure = Figure(
            figsize=((physical_width + 0.01) / self.dpi, (physical_height + 0.01) / self.dpi),
            dpi=self.dpi,
        )
        self.canvas = FigureCanvasAgg(self.figure)
        self.figure.patch.set_alpha(0.0)

        self.ax = self.figure.add_axes((0, 0, 1, 1))
        self.ax.set_axis_off()
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)  # Canvas convention: y grows downwards
        self.ax.set_autoscale_on(False)

        logger.debug(f"Created surface {width}x{height} @{dpr}x "
                     f"({physical_width}x{physical_height} physical)")

    @property
    def physical_size(self) -> Tuple[int, int]:
        """Raster size in physical pixels"""
        return self.canvas.get_width_height()

    def fill_gradient(self, top: RGBA, bottom: RGBA, zorder: float,
                      clip_vertices: Optional[Sequence[Tuple[float, float]]] = None,
                      steps: int = 256, gid: Optional[str] = None):
        """
        Paint a vertical gradient across the whole surface.

        Args:
            top: Color at y = 0
            bottom: Color at y = height
            zorder: Paint order
            clip_vertices: Optional polygon (logical pixels) limiting the fill
            steps: Gradient resolution
            gid: Artist id, used to identify layers

        Returns:
            The AxesImage artist
        """
        image = self.ax.imshow(
            vertical_gradient(top, bottom, steps),
            extent=(0, self.width, self.height, 0),
            aspect='auto',
            interpolation='bilinear',
            zorder=zorder,
        )
        if clip_vertices is not None:
            vertices = list(clip_vertices) + [clip_vertices[0]]
            image.set_clip_path(Path(vertices, closed=True), self.ax.transData)
        if gid:
            image.set_gid(gid)
        return image

    def export_png(self) -> bytes:
        """
        Render the surface and encode it as PNG.

        Returns:
            PNG image as bytes

        Raises:
            RenderError: If matplotlib fails to draw or encode the figure
        """
        buffer = io.BytesIO()
        try:
            self.figure.savefig(buffer, format='png', dpi=self.dpi)
        except Exception as e:
            raise RenderError(f"Failed to export chart image: {e}") from e
        return buffer.getvalue()

    def rgba_bytes(self) -> bytes:
        """Render the surface and return the raw RGBA buffer"""
        self.canvas.draw()
        return bytes(self.canvas.buffer_rgba())

    def close(self):
        """Release the figure's artists"""
        self.figure.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def setup_chart_surface(width: int, height: int, dpr: float) -> ChartSurface:
    """Create a surface for a chart of the given logical size"""
    return ChartSurface(width, height, dpr)
