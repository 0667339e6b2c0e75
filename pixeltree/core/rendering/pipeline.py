"""
Render Pipeline
===============

Depth-first, pre-order traversal of a component tree. For every component
the pipeline resolves style, computes render params, invokes ``draw_self``
and only then recurses into children. The first failure aborts the pass.
"""

from typing import Any, List, Optional, Tuple
import math
import time

from pydantic import BaseModel, Field

from pixeltree.config.logging import get_logger
from pixeltree.core.components.base import Component
from pixeltree.core.errors import GeometryError, NodeIdentity, OtherRenderError, RenderError
from pixeltree.core.layout.engine import layout_children
from pixeltree.core.layout.geometry import Rect
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.models.style import ComponentStyle

logger = get_logger(__name__)


class RenderReport(BaseModel):
    """Summary of a completed pass."""
    visited: List[NodeIdentity] = Field(default_factory=list, description="Components in draw order")
    canvas_width: int = Field(..., description="Canvas width in device pixels")
    canvas_height: int = Field(..., description="Canvas height in device pixels")
    scale_factor: float = Field(..., description="Scale factor used")
    processing_time: float = Field(0.0, description="Pass duration in seconds")

    @property
    def node_count(self) -> int:
        return len(self.visited)


class RenderPipeline:
    """Drives one render pass over a shared canvas."""

    def __init__(self, canvas: Canvas, context: RenderContext):
        self.canvas = canvas
        self.context = context
        self.logger: Any = logger.bind(component="pipeline")
        self._visited: List[NodeIdentity] = []

    def run(self, root: Component, origin: Tuple[float, float] = (0.0, 0.0)) -> RenderReport:
        """
        Render a tree onto the canvas.

        Only resources already in the context's cache size unsized images;
        use ``render`` or ``render_tree`` to load them first.

        Args:
            root: Root component
            origin: Logical position of the root's top-left corner

        Returns:
            RenderReport listing every drawn component in order

        Raises:
            RenderError: The first failure, annotated with the failing node.
                Pixels written before the failure are not a usable result.
        """
        start_time = time.time()
        self._visited = []
        self.logger.info(
            "Render pass started",
            canvas_width=self.canvas.width,
            canvas_height=self.canvas.height,
            scale_factor=self.context.scale_factor,
        )

        try:
            style = self._resolve(root, None, ())
            box = Rect(x=origin[0], y=origin[1], width=style.width, height=style.height)
            self._visit(root, style, box, None, ())
        except RenderError as e:
            self.logger.error(
                "Render pass failed",
                error=e.message,
                kind=e.kind.value,
                node=e.node.describe() if e.node else None,
                drawn=len(self._visited),
            )
            raise

        report = RenderReport(
            visited=list(self._visited),
            canvas_width=self.canvas.width,
            canvas_height=self.canvas.height,
            scale_factor=self.context.scale_factor,
            processing_time=time.time() - start_time,
        )
        self.logger.info(
            "Render pass completed",
            nodes=report.node_count,
            processing_time=report.processing_time,
        )
        return report

    def _resolve(
        self, node: Component, parent_style: Optional[ComponentStyle], path: Tuple[int, ...]
    ) -> ComponentStyle:
        try:
            return node.resolve(parent_style, self.context)
        except RenderError as e:
            # Errors annotated during a container's sizing carry relative paths.
            if e.node is None:
                raise e.at(node.identity(path))
            raise e.within(path)
        except Exception as e:
            raise OtherRenderError(
                f"Style resolution failed: {e}", node.identity(path)
            ) from e

    def _check_geometry(self, style: ComponentStyle, identity: NodeIdentity) -> None:
        for name, value in (("width", style.width), ("height", style.height)):
            if not math.isfinite(value) or value <= 0:
                raise GeometryError(f"Resolved {name} must be positive, got {value}", identity)

    def _visit(
        self,
        node: Component,
        style: ComponentStyle,
        box: Rect,
        parent_style: Optional[ComponentStyle],
        path: Tuple[int, ...],
    ) -> None:
        identity = node.identity(path)
        self._visited.append(identity)
        self._check_geometry(style, identity)

        params = RenderParams.from_layout(box, style, self.context, path)
        self.logger.debug(
            "Drawing component",
            node=identity.describe(),
            x=params.box.x,
            y=params.box.y,
            width=params.box.width,
            height=params.box.height,
        )

        try:
            node.draw_self(self.canvas, self.context, params, style, parent_style)
        except RenderError as e:
            raise e.at(identity)
        except Exception as e:
            raise OtherRenderError(f"Unexpected draw failure: {e}", identity) from e

        children = node.children()
        if not children:
            return

        # Siblings before a child whose style cannot be resolved are still
        # laid out and drawn; the failure surfaces on that child's turn.
        child_styles: List[ComponentStyle] = []
        failure: Optional[RenderError] = None
        for index, child in enumerate(children):
            try:
                child_styles.append(self._resolve(child, style, path + (index,)))
            except RenderError as e:
                failure = e
                break

        child_boxes = layout_children(box, style, child_styles)
        for index, (child, child_style, child_box) in enumerate(
            zip(children, child_styles, child_boxes)
        ):
            self._visit(child, child_style, child_box, style, path + (index,))

        if failure is not None:
            failed_path = path + (len(child_styles),)
            self._visited.append(children[len(child_styles)].identity(failed_path))
            raise failure


def render(root: Component, canvas: Canvas, context: Optional[RenderContext] = None) -> RenderReport:
    """
    Run one pass with a default context when none is given.

    Resources the tree references are loaded first, sequentially, so unsized
    images get their intrinsic size as they do through ``render_tree``.
    """
    context = context or RenderContext()
    context.resources.warm(ref for node in root.walk() for ref in node.resources())
    return RenderPipeline(canvas, context).run(root)
