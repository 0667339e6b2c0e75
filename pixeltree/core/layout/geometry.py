"""
Geometry
========

Axis-aligned rectangles used for layout boxes and scaled drawing regions.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from pixeltree.models.style import Edges


class Rect(BaseModel):
    """Axis-aligned rectangle; origin is the top-left corner."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def inset(self, edges: Edges) -> "Rect":
        """Shrink by the given edges; never produces a negative size."""
        return Rect(
            x=self.x + edges.left,
            y=self.y + edges.top,
            width=max(0.0, self.width - edges.horizontal),
            height=max(0.0, self.height - edges.vertical),
        )

    def scaled(self, factor: float) -> "Rect":
        return Rect(
            x=self.x * factor,
            y=self.y * factor,
            width=self.width * factor,
            height=self.height * factor,
        )

    def pixel_bounds(self) -> Tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) bounds, rounding each edge."""
        return (round(self.x), round(self.y), round(self.right), round(self.bottom))

    def contains_rect(self, other: "Rect") -> bool:
        left, top, right, bottom = self.pixel_bounds()
        o_left, o_top, o_right, o_bottom = other.pixel_bounds()
        return left <= o_left and top <= o_top and o_right <= right and o_bottom <= bottom
