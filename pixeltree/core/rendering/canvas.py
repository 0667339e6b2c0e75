"""
Canvas
======

The mutable RGBA raster shared by every component during a render pass.
Components write pixels only through these compositing operations.
"""

from typing import Any, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw

from pixeltree.config.logging import get_logger
from pixeltree.core.errors import GeometryError
from pixeltree.core.layout.geometry import Rect
from pixeltree.core.rendering.resources import DecodedImage

logger = get_logger(__name__)

RGBA = Tuple[int, int, int, int]


def to_rgba(color: str, opacity: float = 1.0) -> RGBA:
    """Parse a color string and fold ``opacity`` into its alpha channel."""
    rgba = ImageColor.getcolor(color, "RGBA")
    r, g, b, a = rgba  # type: ignore[misc]
    return (r, g, b, round(a * opacity))


def apply_opacity(layer: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1.0:
        return layer
    alpha = layer.getchannel("A").point(lambda a: round(a * opacity))
    layer = layer.copy()
    layer.putalpha(alpha)
    return layer


class Canvas:
    """
    RGBA output buffer.

    Writes falling outside the canvas raise GeometryError. Canvases created
    with ``clip=True`` silently drop the outside part instead.
    """

    def __init__(self, width: int, height: int, background: str = "#00000000", clip: bool = False):
        if width <= 0 or height <= 0:
            raise GeometryError(f"Canvas size must be positive, got {width}x{height}")
        self._image = Image.new("RGBA", (width, height), to_rgba(background))
        self.clip = clip
        self.logger: Any = logger.bind(component="canvas")

    @classmethod
    def for_scale(
        cls,
        width: float,
        height: float,
        scale_factor: float,
        background: str = "#00000000",
        clip: bool = False,
    ) -> "Canvas":
        """Create a canvas for a logical size rendered at ``scale_factor``."""
        return cls(
            max(1, round(width * scale_factor)),
            max(1, round(height * scale_factor)),
            background=background,
            clip=clip,
        )

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def bounds(self) -> Rect:
        return Rect(x=0, y=0, width=self.width, height=self.height)

    @property
    def image(self) -> Image.Image:
        """Read-only copy of the raster."""
        return self._image.copy()

    def pixel(self, x: int, y: int) -> RGBA:
        return self._image.getpixel((x, y))  # type: ignore[return-value]

    def to_rgba_bytes(self) -> bytes:
        return self._image.tobytes()

    def _placement(
        self, left: int, top: int, width: int, height: int
    ) -> Optional[Tuple[Tuple[int, int], Tuple[int, int, int, int]]]:
        """Destination and source crop for a write, honouring the clip policy."""
        right, bottom = left + width, top + height
        if left >= 0 and top >= 0 and right <= self.width and bottom <= self.height:
            return (left, top), (0, 0, width, height)

        if not self.clip:
            raise GeometryError(
                f"Region ({left}, {top}, {right}, {bottom}) lies outside the "
                f"{self.width}x{self.height} canvas"
            )

        c_left, c_top = max(0, left), max(0, top)
        c_right, c_bottom = min(self.width, right), min(self.height, bottom)
        if c_left >= c_right or c_top >= c_bottom:
            return None
        return (c_left, c_top), (c_left - left, c_top - top, c_right - left, c_bottom - top)

    def _blend(self, layer: Image.Image, left: int, top: int) -> None:
        placement = self._placement(left, top, layer.width, layer.height)
        if placement is None:
            return
        dest, source = placement
        self._image.alpha_composite(layer, dest=dest, source=source)

    def composite(
        self,
        source: Union[Image.Image, DecodedImage],
        x: float,
        y: float,
        scale: Union[float, Tuple[float, float]] = 1.0,
        opacity: float = 1.0,
    ) -> None:
        """
        Blend a pixel buffer onto the canvas.

        Args:
            source: Pixels to blend (Pillow image or decoded RGBA buffer)
            x: Destination left edge in device pixels
            y: Destination top edge in device pixels
            scale: Uniform factor or (sx, sy) applied to the source first
            opacity: Extra alpha multiplier in [0, 1]

        Raises:
            GeometryError: If the scaled size is empty or the destination
                falls outside the canvas on a non-clipping canvas
        """
        layer = source.to_pil() if isinstance(source, DecodedImage) else source.convert("RGBA")
        sx, sy = scale if isinstance(scale, tuple) else (scale, scale)
        if sx <= 0 or sy <= 0:
            raise GeometryError(f"Scale must be positive, got ({sx}, {sy})")

        size = (round(layer.width * sx), round(layer.height * sy))
        if size[0] <= 0 or size[1] <= 0:
            raise GeometryError(f"Scaled source size {size[0]}x{size[1]} is empty")
        if size != layer.size:
            layer = layer.resize(size, Image.Resampling.LANCZOS)

        self._blend(apply_opacity(layer, opacity), round(x), round(y))

    def draw_image(
        self,
        source: Union[Image.Image, DecodedImage],
        rect: Rect,
        opacity: float = 1.0,
    ) -> None:
        """Stretch a pixel buffer over a rectangle given in device pixels."""
        left, top, right, bottom = rect.pixel_bounds()
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            raise GeometryError(f"Image target {width}x{height} is empty")
        layer = source.to_pil() if isinstance(source, DecodedImage) else source.convert("RGBA")
        if layer.size != (width, height):
            layer = layer.resize((width, height), Image.Resampling.LANCZOS)
        self._blend(apply_opacity(layer, opacity), left, top)

    def fill_rect(self, rect: Rect, color: str, opacity: float = 1.0, radius: float = 0.0) -> None:
        """Fill a (optionally rounded) rectangle given in device pixels."""
        left, top, right, bottom = rect.pixel_bounds()
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return
        fill = to_rgba(color, opacity)
        if fill[3] == 0:
            return
        layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        if radius > 0:
            draw.rounded_rectangle((0, 0, width - 1, height - 1), radius=radius, fill=fill)
        else:
            draw.rectangle((0, 0, width - 1, height - 1), fill=fill)
        self._blend(layer, left, top)

    def fill_ellipse(self, rect: Rect, color: str, opacity: float = 1.0) -> None:
        """Fill the ellipse inscribed in a rectangle given in device pixels."""
        left, top, right, bottom = rect.pixel_bounds()
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return
        layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        ImageDraw.Draw(layer).ellipse((0, 0, width - 1, height - 1), fill=to_rgba(color, opacity))
        self._blend(layer, left, top)
