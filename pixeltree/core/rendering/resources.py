"""
Resources
=========

Loading of content referenced by components (image files) and a cache that
pre-resolves every reference concurrently before the draw pass starts.
"""

from typing import Any, Dict, Iterable, Optional, Union
from abc import ABC, abstractmethod
from pathlib import Path
import asyncio
import io

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pixeltree.config.logging import get_logger
from pixeltree.config.settings import get_settings
from pixeltree.core.errors import (
    OtherRenderError,
    RenderError,
    ResourceAcquisitionError,
    ResourceDecodingError,
)

logger = get_logger(__name__)


class DecodedImage(BaseModel):
    """Decoded pixel content: row-major RGBA bytes."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    data: bytes = Field(..., repr=False)

    @model_validator(mode="after")
    def check_buffer_size(self) -> "DecodedImage":
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"RGBA buffer holds {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )
        return self

    @classmethod
    def from_pil(cls, image: Image.Image) -> "DecodedImage":
        rgba = image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, data=rgba.tobytes())

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.data)


class ResourceLoader(ABC):
    """Contract for turning a logical reference into decoded pixels."""

    @abstractmethod
    def load(self, reference: str) -> DecodedImage:
        """
        Load and decode a resource.

        Raises:
            ResourceAcquisitionError: If the content cannot be obtained
            ResourceDecodingError: If the content is not a decodable image
        """
        pass


def expand_reference(reference: str, asset_root: Optional[Path] = None) -> Path:
    """Expand ``~`` and resolve relative references against the asset root."""
    path = Path(reference).expanduser()
    if not path.is_absolute() and asset_root is not None:
        path = asset_root / path
    return path


class FileResourceLoader(ResourceLoader):
    """Loads image files from the local file system."""

    def __init__(self, asset_root: Optional[Union[str, Path]] = None):
        settings = get_settings()
        root = Path(asset_root) if asset_root is not None else settings.asset_root
        self.asset_root = root.expanduser() if root is not None else None
        self.logger: Any = logger.bind(loader="file")

    def read_bytes(self, reference: str) -> bytes:
        path = expand_reference(reference, self.asset_root)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ResourceAcquisitionError(f"Failed to open image '{reference}': {e}") from e

    def load(self, reference: str) -> DecodedImage:
        raw = self.read_bytes(reference)
        try:
            with Image.open(io.BytesIO(raw)) as image:
                decoded = DecodedImage.from_pil(image)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ResourceDecodingError(f"Failed to decode image '{reference}': {e}") from e

        self.logger.debug(
            "Image loaded", reference=reference, width=decoded.width, height=decoded.height
        )
        return decoded


class ResourceCache:
    """
    Read-through cache of decoded resources.

    ``preload`` fetches references concurrently ahead of drawing, ``warm`` does
    the same sequentially. Failures are remembered per reference and ``get``
    raises a fresh copy each time, so the component owning the reference fails
    at its own turn in the draw order of every pass.
    """

    def __init__(self, loader: Optional[ResourceLoader] = None, concurrency: Optional[int] = None):
        settings = get_settings()
        self.loader = loader or FileResourceLoader()
        self.concurrency = concurrency or settings.preload_concurrency
        self._images: Dict[str, DecodedImage] = {}
        self._failures: Dict[str, RenderError] = {}
        self.logger: Any = logger.bind(component="resource_cache")

    def __contains__(self, reference: str) -> bool:
        return reference in self._images or reference in self._failures

    def __len__(self) -> int:
        return len(self._images) + len(self._failures)

    def _load(self, reference: str) -> DecodedImage:
        try:
            image = self.loader.load(reference)
        except RenderError as e:
            self._failures[reference] = e
            raise e.detached()
        except Exception as e:
            error = OtherRenderError(f"Unexpected error loading '{reference}': {e}")
            error.__cause__ = e
            self._failures[reference] = error
            raise error.detached()
        self._images[reference] = image
        return image

    def peek(self, reference: str) -> Optional[DecodedImage]:
        """Return a resource only if it is already loaded; never triggers a load."""
        return self._images.get(reference)

    def get(self, reference: str) -> DecodedImage:
        """Return a decoded resource, loading it synchronously on a miss."""
        if reference in self._images:
            return self._images[reference]
        if reference in self._failures:
            # Callers annotate what they catch; the stored error stays clean.
            raise self._failures[reference].detached()
        return self._load(reference)

    def warm(self, references: Iterable[str]) -> None:
        """Load every reference not yet cached, one at a time; failures are stored."""
        for reference in dict.fromkeys(references):
            if reference in self:
                continue
            try:
                self._load(reference)
            except RenderError as e:
                self.logger.warning("Resource load failed", reference=reference, error=str(e))

    async def preload(self, references: Iterable[str]) -> None:
        """Load every reference not yet cached, at most ``concurrency`` at a time."""
        pending = list(dict.fromkeys(ref for ref in references if ref not in self))
        if not pending:
            return

        semaphore = asyncio.Semaphore(self.concurrency)

        async def load_one(reference: str) -> None:
            async with semaphore:
                try:
                    await asyncio.to_thread(self._load, reference)
                except RenderError as e:
                    self.logger.warning("Resource preload failed", reference=reference, error=str(e))

        self.logger.info("Preloading resources", count=len(pending))
        await asyncio.gather(*(load_one(ref) for ref in pending))
        self.logger.info(
            "Resources preloaded", loaded=len(self._images), failed=len(self._failures)
        )
