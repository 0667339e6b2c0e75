"""
Text Component
==============

Draws a (possibly multi-line) string with a Pillow font. When no size is
declared the component measures its text at the resolved font size.
"""

from typing import Optional, Tuple, Union
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from pixeltree.core.components.base import Component
from pixeltree.core.errors import ResourceAcquisitionError
from pixeltree.core.layout.style import partially_resolve
from pixeltree.core.rendering.canvas import Canvas, to_rgba
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.models.schemas import ComponentKind
from pixeltree.models.style import Alignment, ComponentStyle, RawComponentStyle

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

DEFAULT_FONT = "default"

_TEXT_ALIGN = {Alignment.START: "left", Alignment.CENTER: "center", Alignment.END: "right"}


@lru_cache(maxsize=64)
def load_font(family: str, size: int) -> Font:
    """
    Load a font at a pixel size.

    Args:
        family: Path to a TrueType/OpenType file, or "default" for Pillow's
            built-in font
        size: Size in device pixels

    Raises:
        ResourceAcquisitionError: If the font file cannot be opened
    """
    size = max(1, size)
    if family == DEFAULT_FONT:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(Path(family).expanduser()), size)
    except OSError as e:
        raise ResourceAcquisitionError(f"Failed to load font '{family}': {e}") from e


def measure_text(text: str, font: Font) -> Tuple[int, int]:
    """Width and height of the text's ink box measured from the drawing origin."""
    if not text:
        return (0, 0)
    draw = ImageDraw.Draw(Image.new("L", (1, 1)))
    _, _, right, bottom = draw.multiline_textbbox((0, 0), text, font=font)
    return (int(right), int(bottom))


class TextComponent(Component):
    """Component showing a string of text."""

    kind = ComponentKind.TEXT

    def __init__(
        self,
        text: str,
        *,
        style: Optional[RawComponentStyle] = None,
        label: Optional[str] = None,
    ):
        super().__init__(style=style, label=label)
        self.text = text

    def default_size(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> Tuple[float, float]:
        raw = self.style()
        family = partially_resolve(raw, parent_style, "font_family")
        size = partially_resolve(raw, parent_style, "font_size")
        try:
            font = load_font(family, round(size))
        except ResourceAcquisitionError:
            # Measure with the built-in font; drawing reports the failure.
            font = load_font(DEFAULT_FONT, round(size))

        width, height = measure_text(self.text, font)
        pad_h = raw.padding.horizontal if raw.padding else 0.0
        pad_v = raw.padding.vertical if raw.padding else 0.0
        return (width + pad_h, height + pad_v)

    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        font = load_font(style.font_family, round(context.scale(style.font_size)))

        self.draw_background(canvas, params, style)

        left, top, right, bottom = params.content.pixel_bounds()
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0 or not self.text:
            return

        text_w, text_h = measure_text(self.text, font)
        offset = (
            style.align.factor * (width - text_w),
            style.vertical_align.factor * (height - text_h),
        )
        # Drawing into a layer the size of the content box clips overflow.
        layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        ImageDraw.Draw(layer).multiline_text(
            offset,
            self.text,
            font=font,
            fill=to_rgba(style.color, style.opacity),
            align=_TEXT_ALIGN[style.align],
        )
        canvas.composite(layer, left, top)
