"""
Container Component
===================

Groups children, paints an optional background and, when no size is
declared, shrink-wraps its stacked children plus padding.
"""

from typing import Optional, Sequence, Tuple

from pixeltree.core.components.base import Component
from pixeltree.core.errors import OtherRenderError, RenderError
from pixeltree.core.layout.engine import stacked_extent
from pixeltree.core.layout.style import base_defaults, resolve_style
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.models.schemas import ComponentKind
from pixeltree.models.style import ComponentStyle, RawComponentStyle, StackDirection


class Container(Component):
    """Component that lays out and owns child components."""

    kind = ComponentKind.CONTAINER
    accepts_children = True

    def __init__(
        self,
        children: Sequence[Component] = (),
        *,
        style: Optional[RawComponentStyle] = None,
        radius: float = 0.0,
        label: Optional[str] = None,
    ):
        if radius < 0:
            raise ValueError("Container radius must be >= 0")
        super().__init__(style=style, children=children, label=label)
        self.radius = radius

    def default_size(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> Tuple[float, float]:
        # Box size never inherits, so a zero-sized provisional style gives
        # children the same inherited attributes as the final one.
        provisional = resolve_style(
            self.style(), parent_style, {**base_defaults(), "width": 0.0, "height": 0.0}
        )
        child_styles = []
        for index, child in enumerate(self.children()):
            try:
                child_styles.append(child.resolve(provisional, context))
            except RenderError as e:
                # Paths are relative to this container; the pipeline rebases them.
                if e.node is None:
                    raise e.at(child.identity((index,)))
                raise e.within((index,))
            except Exception as e:
                raise OtherRenderError(
                    f"Style resolution failed: {e}", child.identity((index,))
                ) from e

        main = stacked_extent(provisional, child_styles)
        if provisional.direction == StackDirection.VERTICAL:
            cross = max((child.width for child in child_styles), default=0.0)
            width, height = cross, main
        else:
            cross = max((child.height for child in child_styles), default=0.0)
            width, height = main, cross

        padding = provisional.padding
        return (width + padding.horizontal, height + padding.vertical)

    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        if self.radius > 0:
            canvas.fill_rect(
                params.box,
                style.background,
                opacity=style.opacity,
                radius=context.scale(self.radius),
            )
            return
        self.draw_background(canvas, params, style)
