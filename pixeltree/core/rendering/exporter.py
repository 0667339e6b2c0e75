"""
PNG Exporter
============

Serializes a finished canvas to PNG bytes.
"""

from typing import Any, Union
from pathlib import Path
import base64
import io

from pixeltree.config.logging import get_logger
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.models.schemas import PNGResult

logger = get_logger(__name__)


class ExportError(Exception):
    """Exception raised when a canvas cannot be exported."""

    pass


def export_png(canvas: Canvas, optimize: bool = True) -> PNGResult:
    """
    Encode a canvas as PNG.

    Args:
        canvas: Finished canvas
        optimize: Let Pillow spend extra effort on file size

    Returns:
        PNGResult containing PNG data and metadata

    Raises:
        ExportError: If encoding fails
    """
    log: Any = logger.bind(exporter="png")
    buffer = io.BytesIO()
    try:
        canvas.image.save(buffer, format="PNG", optimize=optimize)
    except (OSError, ValueError) as e:
        log.error("PNG export failed", error=str(e))
        raise ExportError(f"PNG export failed: {e}") from e

    png_data = buffer.getvalue()
    result = PNGResult(
        png_data=png_data,
        base64_data=base64.b64encode(png_data).decode("utf-8"),
        width=canvas.width,
        height=canvas.height,
        file_size=len(png_data),
        metadata={"format": "PNG", "mode": "RGBA", "optimized": optimize},
    )
    log.info("PNG export completed", file_size=result.file_size)
    return result


def save_png(canvas: Canvas, path: Union[str, Path], optimize: bool = True) -> Path:
    """Write a canvas to a PNG file and return the resolved path."""
    target = Path(path).expanduser()
    result = export_png(canvas, optimize=optimize)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(result.png_data)
    except OSError as e:
        raise ExportError(f"Failed to write '{target}': {e}") from e
    return target
