"""
Render Errors
=============

Closed set of failure causes that abort a render pass. Every error may carry
the identity of the component that failed so callers can locate it.
"""

from typing import Optional, Tuple
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RenderErrorKind(str, Enum):
    """Failure categories supported by the pipeline."""
    RESOURCE_ACQUISITION = "resource_acquisition"
    RESOURCE_DECODING = "resource_decoding"
    GEOMETRY = "geometry"
    OTHER = "other"


class NodeIdentity(BaseModel):
    """Where in the tree a failure happened."""

    model_config = ConfigDict(frozen=True)

    kind: str
    label: Optional[str] = None
    path: Tuple[int, ...] = ()

    def describe(self) -> str:
        location = "/".join(str(i) for i in self.path) or "root"
        name = f"{self.kind} '{self.label}'" if self.label else self.kind
        return f"{name} at {location}"


class RenderError(Exception):
    """Base class for all failures that abort a render pass."""

    kind = RenderErrorKind.OTHER

    def __init__(self, message: str, node: Optional[NodeIdentity] = None):
        super().__init__(message)
        self.message = message
        self.node = node

    def at(self, node: NodeIdentity) -> "RenderError":
        """Annotate the error with the failing node unless already annotated."""
        if self.node is None:
            self.node = node
        return self

    def within(self, parent_path: Tuple[int, ...]) -> "RenderError":
        """Prefix the annotated node's path with the path of an enclosing node."""
        if self.node is not None:
            self.node = self.node.model_copy(update={"path": parent_path + self.node.path})
        return self

    def detached(self) -> "RenderError":
        """A new, unannotated error of the same kind and cause as this one."""
        error = type(self)(self.message)
        error.__cause__ = self.__cause__ or self
        return error

    def __str__(self) -> str:
        if self.node is None:
            return self.message
        return f"{self.node.describe()}: {self.message}"


class ResourceAcquisitionError(RenderError):
    """Content referenced by a node could not be obtained."""

    kind = RenderErrorKind.RESOURCE_ACQUISITION


class ResourceDecodingError(RenderError):
    """Obtained content is malformed for its expected kind."""

    kind = RenderErrorKind.RESOURCE_DECODING


class GeometryError(RenderError):
    """Computed or requested dimensions are invalid."""

    kind = RenderErrorKind.GEOMETRY


class OtherRenderError(RenderError):
    """Node-specific failure without a dedicated category."""

    kind = RenderErrorKind.OTHER
