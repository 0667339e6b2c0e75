"""
Shape Components
================

Filled rectangles and ellipses. Shapes have no intrinsic size, so an
unsized shape fails the pass with a geometry error.
"""

from typing import Optional

from pixeltree.core.components.base import Component
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.models.schemas import ComponentKind
from pixeltree.models.style import ComponentStyle, RawComponentStyle, validate_color


class ShapeComponent(Component):
    """Base for shapes filled with ``fill`` or, when unset, the resolved color."""

    def __init__(
        self,
        *,
        fill: Optional[str] = None,
        style: Optional[RawComponentStyle] = None,
        label: Optional[str] = None,
    ):
        super().__init__(style=style, label=label)
        self.fill = validate_color(fill) if fill is not None else None

    def fill_color(self, style: ComponentStyle) -> str:
        return self.fill or style.color


class RectComponent(ShapeComponent):
    """Filled, optionally rounded, rectangle covering the content box."""

    kind = ComponentKind.RECT

    def __init__(
        self,
        *,
        fill: Optional[str] = None,
        radius: float = 0.0,
        style: Optional[RawComponentStyle] = None,
        label: Optional[str] = None,
    ):
        if radius < 0:
            raise ValueError("Rectangle radius must be >= 0")
        super().__init__(fill=fill, style=style, label=label)
        self.radius = radius

    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        self.draw_background(canvas, params, style)
        canvas.fill_rect(
            params.content,
            self.fill_color(style),
            opacity=style.opacity,
            radius=context.scale(self.radius),
        )


class EllipseComponent(ShapeComponent):
    """Filled ellipse inscribed in the content box."""

    kind = ComponentKind.ELLIPSE

    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        self.draw_background(canvas, params, style)
        canvas.fill_ellipse(params.content, self.fill_color(style), opacity=style.opacity)
