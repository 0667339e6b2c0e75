"""
Component Base
==============

The polymorphic contract every drawable node satisfies: it owns an ordered
sequence of children, exposes its raw style and draws itself into a region
of the canvas. Recursion into children is the pipeline's job.
"""

from typing import Any, Dict, Iterable, Iterator, Optional, Sequence, Tuple
from abc import ABC, abstractmethod

from pixeltree.core.errors import NodeIdentity
from pixeltree.core.layout.style import TRANSPARENT, base_defaults, resolve_style
from pixeltree.core.rendering.canvas import Canvas, to_rgba
from pixeltree.core.rendering.context import RenderContext, RenderParams
from pixeltree.models.schemas import ComponentKind
from pixeltree.models.style import ComponentStyle, RawComponentStyle


class Component(ABC):
    """Abstract base class for drawable components."""

    kind: ComponentKind
    accepts_children: bool = False

    DEFAULT_WIDTH: float = 0.0
    DEFAULT_HEIGHT: float = 0.0

    def __init__(
        self,
        *,
        style: Optional[RawComponentStyle] = None,
        children: Sequence["Component"] = (),
        label: Optional[str] = None,
    ):
        children = tuple(children)
        if children and not self.accepts_children:
            raise ValueError(f"Component kind '{self.kind.value}' cannot have children")
        for child in children:
            if not isinstance(child, Component):
                raise TypeError(f"Children must be components, got {type(child).__name__}")
        self._children: Tuple["Component", ...] = children
        self._style = style or RawComponentStyle()
        self._label = label

    def __repr__(self) -> str:
        label = f" {self._label!r}" if self._label else ""
        return f"<{type(self).__name__}{label} children={len(self._children)}>"

    def children(self) -> Tuple["Component", ...]:
        """Ordered, read-only child sequence (empty for leaves)."""
        return self._children

    def style(self) -> RawComponentStyle:
        """This component's own, possibly partial, style."""
        return self._style

    @property
    def label(self) -> Optional[str]:
        return self._label

    def identity(self, path: Tuple[int, ...] = ()) -> NodeIdentity:
        return NodeIdentity(kind=self.kind.value, label=self._label, path=path)

    def walk(self) -> Iterator["Component"]:
        """All components of the subtree, in pre-order."""
        yield self
        for child in self._children:
            yield from child.walk()

    def resources(self) -> Iterable[str]:
        """Resource references this component needs while drawing."""
        return ()

    def default_size(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> Tuple[float, float]:
        """Type-level width and height used when the raw style leaves them unset."""
        return (self.DEFAULT_WIDTH, self.DEFAULT_HEIGHT)

    def style_defaults(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> Dict[str, Any]:
        defaults = base_defaults()
        raw = self.style()
        if raw.width is not None and raw.height is not None:
            width, height = raw.width, raw.height
        else:
            width, height = self.default_size(parent_style, context)
        defaults["width"] = width
        defaults["height"] = height
        return defaults

    def resolve(
        self, parent_style: Optional[ComponentStyle], context: RenderContext
    ) -> ComponentStyle:
        """Resolve this component's style against its parent's resolved style."""
        return resolve_style(self.style(), parent_style, self.style_defaults(parent_style, context))

    def draw_background(self, canvas: Canvas, params: RenderParams, style: ComponentStyle) -> None:
        if style.background == TRANSPARENT or to_rgba(style.background)[3] == 0:
            return
        canvas.fill_rect(params.box, style.background, opacity=style.opacity)

    @abstractmethod
    def draw_self(
        self,
        canvas: Canvas,
        context: RenderContext,
        params: RenderParams,
        style: ComponentStyle,
        parent_style: Optional[ComponentStyle],
    ) -> None:
        """
        Draw this component's own contribution.

        Only pixels inside ``params.box`` may be written. Children are not
        drawn here.

        Raises:
            RenderError: If the component cannot be drawn
        """
        pass
