"""
Style Models
============

Raw (caller-declared, partially specified) and resolved (fully specified)
component styles, plus the four-sided edges primitive used for padding.
"""

from typing import Optional, Union, Sequence, Mapping, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from PIL import ImageColor


# Enums
class Alignment(str, Enum):
    """Placement of a component inside the free space of its parent."""
    START = "start"
    CENTER = "center"
    END = "end"

    @property
    def factor(self) -> float:
        """Fraction of the remaining space placed before the component."""
        return _ALIGNMENT_FACTORS[self]


_ALIGNMENT_FACTORS = {
    Alignment.START: 0.0,
    Alignment.CENTER: 0.5,
    Alignment.END: 1.0,
}


class StackDirection(str, Enum):
    """Axis along which a container stacks its children."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def validate_color(value: str) -> str:
    """Validate a color string understood by Pillow (#RGB, #RRGGBBAA, names, rgb())."""
    try:
        ImageColor.getrgb(value)
    except ValueError as e:
        raise ValueError(f"Invalid color: {value!r}") from e
    return value


class Edges(BaseModel):
    """Four independent, non-negative offsets (top, right, bottom, left)."""

    model_config = ConfigDict(frozen=True)

    top: float = Field(0.0, ge=0)
    right: float = Field(0.0, ge=0)
    bottom: float = Field(0.0, ge=0)
    left: float = Field(0.0, ge=0)

    @classmethod
    def uniform(cls, value: float) -> "Edges":
        return cls(top=value, right=value, bottom=value, left=value)

    @classmethod
    def symmetric(cls, vertical: float, horizontal: float) -> "Edges":
        return cls(top=vertical, right=horizontal, bottom=vertical, left=horizontal)

    @classmethod
    def coerce(cls, value: Union["Edges", float, int, Sequence[float], Mapping[str, Any]]) -> "Edges":
        """
        Build edges from the shorthand forms accepted in documents.

        Args:
            value: A number (all sides), ``[vertical, horizontal]``,
                ``[top, right, bottom, left]``, a mapping of sides, or Edges

        Returns:
            Edges instance

        Raises:
            ValueError: If the shorthand has an unsupported shape
        """
        if isinstance(value, Edges):
            return value
        if isinstance(value, bool):
            raise ValueError("Padding must be a number, a list or a mapping")
        if isinstance(value, (int, float)):
            return cls.uniform(float(value))
        if isinstance(value, Mapping):
            return cls(**value)
        if isinstance(value, (list, tuple)):
            if len(value) == 1:
                return cls.uniform(float(value[0]))
            if len(value) == 2:
                return cls.symmetric(float(value[0]), float(value[1]))
            if len(value) == 4:
                top, right, bottom, left = (float(v) for v in value)
                return cls(top=top, right=right, bottom=bottom, left=left)
        raise ValueError(f"Unsupported padding shorthand: {value!r}")

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


class RawComponentStyle(BaseModel):
    """Caller-declared style; ``None`` means the attribute is unset."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Box model
    width: Optional[float] = Field(None, description="Declared width in logical pixels")
    height: Optional[float] = Field(None, description="Declared height in logical pixels")
    padding: Optional[Edges] = None

    # Stacking
    direction: Optional[StackDirection] = None
    spacing: Optional[float] = Field(None, ge=0)

    # Presentation
    align: Optional[Alignment] = None
    vertical_align: Optional[Alignment] = Field(None, alias="verticalAlign")
    background: Optional[str] = None
    color: Optional[str] = None
    font_size: Optional[float] = Field(None, gt=0, alias="fontSize")
    font_family: Optional[str] = Field(None, alias="fontFamily")
    opacity: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("padding", mode="before")
    @classmethod
    def coerce_padding(cls, v: Any) -> Any:
        """Accept padding shorthands."""
        if v is None:
            return v
        return Edges.coerce(v)

    @field_validator("background", "color")
    @classmethod
    def validate_colors(cls, v: Optional[str]) -> Optional[str]:
        """Validate color values."""
        if v is None:
            return v
        return validate_color(v)

    def is_fully_specified(self) -> bool:
        """Whether every attribute has been set."""
        return all(getattr(self, name) is not None for name in type(self).model_fields)


class ComponentStyle(BaseModel):
    """Fully resolved style; every attribute carries a concrete value."""

    model_config = ConfigDict(frozen=True)

    width: float
    height: float
    padding: Edges
    direction: StackDirection
    spacing: float
    align: Alignment
    vertical_align: Alignment
    background: str
    color: str
    font_size: float
    font_family: str
    opacity: float

    def content_size(self) -> tuple[float, float]:
        """Width and height left for children once padding is removed."""
        return (
            max(0.0, self.width - self.padding.horizontal),
            max(0.0, self.height - self.padding.vertical),
        )
