"""
Pydantic Models and Schemas
===========================

Data models for component documents, render options and render results.
"""

from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pixeltree.models.style import RawComponentStyle, validate_color


# Enums
class ComponentKind(str, Enum):
    """Drawable component kinds."""
    CONTAINER = "container"
    IMAGE = "image"
    TEXT = "text"
    RECT = "rect"
    ELLIPSE = "ellipse"


class ImageFit(str, Enum):
    """How an image fills its content box."""
    CONTAIN = "contain"
    COVER = "cover"
    FILL = "fill"


# Document Models
class DSLElement(BaseModel):
    """A component declared in a document."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Component label")
    type: ComponentKind = Field(..., description="Component kind")
    style: RawComponentStyle = Field(default_factory=RawComponentStyle)

    # Content properties
    text: Optional[str] = Field(None, description="Text content")
    src: Optional[str] = Field(None, description="Image resource reference")
    fit: ImageFit = Field(ImageFit.CONTAIN, description="Image fit mode")
    fill: Optional[str] = Field(None, description="Shape fill color")
    radius: float = Field(0.0, ge=0, description="Rectangle corner radius")

    # Container properties
    children: List["DSLElement"] = Field(default_factory=list)

    @field_validator("fill")
    @classmethod
    def validate_fill(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_color(v)

    @model_validator(mode="after")
    def validate_children(self) -> "DSLElement":
        """Validate that only containers have children."""
        if self.children and self.type != ComponentKind.CONTAINER:
            raise ValueError(f"Element type {self.type.value} cannot have children")
        return self


DSLElement.model_rebuild()


class DSLDocument(BaseModel):
    """Complete component document."""

    title: Optional[str] = Field(None, description="Document title")

    # Canvas properties (logical units)
    width: int = Field(800, gt=0, description="Canvas width")
    height: int = Field(600, gt=0, description="Canvas height")
    scale: float = Field(1.0, gt=0, description="Output scale factor")
    background: Optional[str] = Field(None, description="Canvas background color")

    root: DSLElement = Field(..., description="Root component")

    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata")
    version: str = Field("1.0", description="Document version")

    @field_validator("background")
    @classmethod
    def validate_background(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_color(v)

    def render_options(self) -> "RenderOptions":
        return RenderOptions(
            width=self.width,
            height=self.height,
            scale_factor=self.scale,
            background_color=self.background,
        )


# Parsing Results
class ParseResult(BaseModel):
    """Result of document parsing operation."""
    success: bool = Field(..., description="Whether parsing succeeded")
    document: Optional[DSLDocument] = Field(None, description="Parsed document")
    errors: List[str] = Field(default_factory=list, description="Parsing errors")
    warnings: List[str] = Field(default_factory=list, description="Parsing warnings")
    processing_time: Optional[float] = Field(None, description="Parsing time in seconds")


# Rendering Models
class RenderOptions(BaseModel):
    """Options for one render pass."""
    width: int = Field(800, gt=0, description="Canvas width in logical pixels")
    height: int = Field(600, gt=0, description="Canvas height in logical pixels")
    scale_factor: float = Field(1.0, gt=0, description="Device pixel ratio")

    # Canvas options
    background_color: Optional[str] = Field(None, description="Background color")
    transparent_background: bool = Field(True, description="Transparent when no background color")
    clip: bool = Field(False, description="Clip writes outside the canvas instead of failing")

    # Image options
    optimize_png: bool = Field(True, description="Optimize PNG file size")

    @field_validator("background_color")
    @classmethod
    def validate_background(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_color(v)

    @property
    def canvas_background(self) -> str:
        if self.background_color:
            return self.background_color
        return "#00000000" if self.transparent_background else "#ffffff"

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (
            max(1, round(self.width * self.scale_factor)),
            max(1, round(self.height * self.scale_factor)),
        )


class PNGResult(BaseModel):
    """Result of PNG export."""
    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    base64_data: str = Field(..., description="Base64 encoded PNG data")
    width: int = Field(..., description="Image width")
    height: int = Field(..., description="Image height")
    file_size: int = Field(..., description="File size in bytes")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Export metadata")


class RenderResponse(BaseModel):
    """Outcome of rendering a document."""
    success: bool = Field(..., description="Whether rendering succeeded")
    png_result: Optional[PNGResult] = Field(None, description="PNG export result")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_kind: Optional[str] = Field(None, description="Render error category if failed")
    nodes_drawn: int = Field(0, ge=0, description="Components drawn")
    processing_time: float = Field(..., description="Total processing time")
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
