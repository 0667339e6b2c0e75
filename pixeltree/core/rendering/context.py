"""
Render Context
==============

Pass-wide configuration (scale factor and resources) and the
per-node render parameters computed right before a component draws.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from pixeltree.core.layout.geometry import Rect
from pixeltree.core.rendering.resources import ResourceCache
from pixeltree.models.style import ComponentStyle


class RenderContext(BaseModel):
    """Immutable configuration shared by every component during one pass."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    scale_factor: float = Field(1.0, gt=0, description="Logical to device pixel ratio")
    resources: ResourceCache = Field(default_factory=ResourceCache)

    def scale(self, value: float) -> float:
        return value * self.scale_factor


class RenderParams(BaseModel):
    """A component's drawing region for the current pass, in device pixels."""

    model_config = ConfigDict(frozen=True)

    box: Rect = Field(..., description="Outer box, scaled")
    content: Rect = Field(..., description="Box minus padding, scaled")
    path: Tuple[int, ...] = Field((), description="Child indices from the root")

    @property
    def x(self) -> float:
        return self.box.x

    @property
    def y(self) -> float:
        return self.box.y

    @property
    def depth(self) -> int:
        return len(self.path)

    @classmethod
    def from_layout(
        cls,
        box: Rect,
        style: ComponentStyle,
        context: RenderContext,
        path: Tuple[int, ...] = (),
    ) -> "RenderParams":
        """Scale a logical layout box into device pixels."""
        return cls(
            box=box.scaled(context.scale_factor),
            content=box.inset(style.padding).scaled(context.scale_factor),
            path=path,
        )
