"""
Image Component
===============

Draws a decoded image resource fitted into the component's content box.
"""

from typing import Iterable, Optional, Tuple

from pixeltree.core.components.base import Component
from pixeltree.core.errors import GeometryError
from pixeltree.core.layout.geometry import Rect
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.core.rendering.resources import DecodedImage
from pixeltree.models.schemas import ComponentKind, ImageFit
from pixeltree.models.style import ComponentStyle, RawComponentStyle

IMAGE_DEFAULT_SIZE = 100.0


def fit_image(
    image_size: Tuple[int, int], box: Rect, fit: ImageFit
) -> Tuple[Tuple[float, float, float, float], Rect]:
    """
    Compute the source crop and destination rectangle for a fit mode.

    Args:
        image_size: Source width and height in pixels
        box: Destination content box
        fit: contain (letterbox, centered), cover (crop, centered) or fill

    Returns:
        Tuple of (source crop box, destination rect)
    """
    iw, ih = image_size
    full = (0.0, 0.0, float(iw), float(ih))

    if fit == ImageFit.FILL:
        return full, box

    if fit == ImageFit.CONTAIN:
        scale = min(box.width / iw, box.height / ih)
        width, height = iw * scale, ih * scale
        dest = Rect(
            x=box.x + (box.width - width) / 2,
            y=box.y + (box.height - height) / 2,
            width=width,
            height=height,
        )
        return full, dest

    scale = max(box.width / iw, box.height / ih)
    crop_w, crop_h = box.width / scale, box.height / scale
    left, top = (iw - crop_w) / 2, (ih - crop_h) / 2
    return (left, top, left + crop_w, top + crop_h), box


class ImageComponent(Component):
    """Component showing an image loaded through the resource cache."""

    kind = ComponentKind.IMAGE
    DEFAULT_WIDTH = IMAGE_DEFAULT_SIZE
    DEFAULT_HEIGHT = IMAGE_DEFAULT_SIZE

    def __init__(
        self,
        src: str,
        *,
        width: Optional[float] = None,
        height: Optional[float] = None,
        fit: ImageFit = ImageFit.CONTAIN,
        style: Optional[RawComponentStyle] = None,
        label: Optional[str] = None,
    ):
        if not src:
            raise ValueError("Image source must be non-empty")
        style = style or RawComponentStyle()
        updates = {}
        if width is not None:
            updates["width"] = width
        if height is not None:
            updates["height"] = height
        if updates:
            style = style.model_copy(update=updates)
        super().__init__(style=style, label=label)
        self.src = src
        self.fit = ImageFit(fit)

    def resources(self) -> Iterable[str]:
        return (self.src,)

    def default_size(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> Tuple[float, float]:
        intrinsic = context.resources.peek(self.src)
        if intrinsic is None:
            return (self.DEFAULT_WIDTH, self.DEFAULT_HEIGHT)

        # Keep the intrinsic aspect ratio for whichever side is missing.
        raw = self.style()
        pad_h = raw.padding.horizontal if raw.padding else 0.0
        pad_v = raw.padding.vertical if raw.padding else 0.0
        iw, ih = float(intrinsic.width), float(intrinsic.height)
        if raw.width is not None:
            content_w = max(0.0, raw.width - pad_h)
            return (raw.width, content_w * ih / iw + pad_v)
        if raw.height is not None:
            content_h = max(0.0, raw.height - pad_v)
            return (content_h * iw / ih + pad_h, raw.height)
        return (iw + pad_h, ih + pad_v)

    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        decoded: DecodedImage = context.resources.get(self.src)

        self.draw_background(canvas, params, style)

        if params.content.width <= 0 or params.content.height <= 0:
            raise GeometryError(f"Image '{self.src}' has no room inside its padding")

        crop, dest = fit_image((decoded.width, decoded.height), params.content, self.fit)
        source = decoded.to_pil()
        if crop != (0.0, 0.0, float(decoded.width), float(decoded.height)):
            source = source.crop(tuple(round(v) for v in crop))
        canvas.draw_image(source, dest, opacity=style.opacity)
