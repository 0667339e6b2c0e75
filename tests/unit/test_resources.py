"""
Unit Tests for Resources
========================

Tests for decoded images, file loading and the pre-loading cache.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pixeltree.core.components import ImageComponent
from pixeltree.core.errors import (
    NodeIdentity,
    OtherRenderError,
    ResourceAcquisitionError,
    ResourceDecodingError,
)
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext
from pixeltree.core.rendering.pipeline import render
from pixeltree.core.rendering.resources import (
    DecodedImage,
    FileResourceLoader,
    ResourceCache,
    expand_reference,
)

from tests.utils.mocks import StubResourceLoader, solid_image


class TestDecodedImage:
    """Test the decoded pixel buffer."""

    def test_buffer_size_checked(self):
        with pytest.raises(ValidationError):
            DecodedImage(width=2, height=2, data=b"\x00" * 15)

    def test_pil_conversion(self):
        image = solid_image(3, 2, (1, 2, 3, 4))
        pil = image.to_pil()

        assert pil.size == (3, 2)
        assert pil.getpixel((2, 1)) == (1, 2, 3, 4)
        assert DecodedImage.from_pil(pil) == image


class TestFileResourceLoader:
    """Test loading images from disk."""

    def test_load_relative_to_asset_root(self, image_dir):
        decoded = FileResourceLoader(asset_root=image_dir).load("green.png")

        assert (decoded.width, decoded.height) == (8, 4)
        assert decoded.to_pil().getpixel((0, 0)) == (0, 255, 0, 255)

    def test_load_absolute_path(self, image_dir):
        decoded = FileResourceLoader().load(str(image_dir / "green.png"))
        assert decoded.width == 8

    def test_missing_file_is_acquisition_error(self, image_dir):
        with pytest.raises(ResourceAcquisitionError):
            FileResourceLoader(asset_root=image_dir).load("missing.png")

    def test_garbage_bytes_are_decoding_error(self, image_dir):
        with pytest.raises(ResourceDecodingError):
            FileResourceLoader(asset_root=image_dir).load("corrupt.png")

    def test_expand_reference(self, tmp_path):
        assert expand_reference("~/logo.png") == Path.home() / "logo.png"
        assert expand_reference("logo.png", tmp_path) == tmp_path / "logo.png"
        assert expand_reference("/abs/logo.png", tmp_path) == Path("/abs/logo.png")


class TestResourceCache:
    """Test caching, pre-loading and stored failures."""

    def test_get_loads_once(self, stub_loader):
        cache = ResourceCache(stub_loader)

        first = cache.get("red.png")
        second = cache.get("red.png")

        assert first is second
        assert stub_loader.calls == ["red.png"]

    def test_peek_never_loads(self, stub_loader):
        cache = ResourceCache(stub_loader)

        assert cache.peek("red.png") is None
        assert stub_loader.calls == []

    @pytest.mark.asyncio
    async def test_preload_deduplicates(self, stub_loader):
        cache = ResourceCache(stub_loader, concurrency=2)

        await cache.preload(["red.png", "wide.png", "red.png"])

        assert sorted(stub_loader.calls) == ["red.png", "wide.png"]
        assert len(cache) == 2
        assert cache.peek("wide.png").width == 40

    @pytest.mark.asyncio
    async def test_preload_skips_cached(self, stub_loader):
        cache = ResourceCache(stub_loader)
        cache.get("red.png")

        await cache.preload(["red.png"])

        assert stub_loader.calls == ["red.png"]

    @pytest.mark.asyncio
    async def test_preload_failure_is_deferred_to_get(self):
        loader = StubResourceLoader({"bad.png": ResourceDecodingError("broken")})
        cache = ResourceCache(loader)

        await cache.preload(["bad.png", "missing.png"])

        assert "bad.png" in cache
        assert cache.peek("bad.png") is None
        with pytest.raises(ResourceDecodingError):
            cache.get("bad.png")
        with pytest.raises(ResourceAcquisitionError):
            cache.get("missing.png")
        assert sorted(loader.calls) == ["bad.png", "missing.png"]

    def test_unexpected_loader_error_is_wrapped(self):
        loader = StubResourceLoader({"odd.png": RuntimeError("disk on fire")})
        cache = ResourceCache(loader)

        with pytest.raises(OtherRenderError) as exc_info:
            cache.get("odd.png")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        with pytest.raises(OtherRenderError):
            cache.get("odd.png")
        assert loader.calls == ["odd.png"]

    def test_stored_failure_raised_fresh_each_time(self):
        loader = StubResourceLoader({"bad.png": ResourceDecodingError("broken")})
        cache = ResourceCache(loader)

        with pytest.raises(ResourceDecodingError) as first:
            cache.get("bad.png")
        first.value.at(NodeIdentity(kind="image", label="first", path=(0,)))
        with pytest.raises(ResourceDecodingError) as second:
            cache.get("bad.png")

        assert second.value is not first.value
        assert second.value.node is None
        assert str(second.value) == "broken"

    def test_reused_cache_reports_each_failing_image(self):
        cache = ResourceCache(StubResourceLoader({"bad.png": ResourceDecodingError("broken")}))

        labels = []
        for label in ("first", "second"):
            image = ImageComponent("bad.png", width=10, height=10, label=label)
            with pytest.raises(ResourceDecodingError) as exc_info:
                render(image, Canvas(20, 20), RenderContext(resources=cache))
            labels.append(exc_info.value.node.label)

        assert labels == ["first", "second"]

    def test_warm_loads_once_and_stores_failures(self, stub_loader):
        cache = ResourceCache(stub_loader)

        cache.warm(["red.png", "missing.png", "red.png"])
        cache.warm(["red.png", "missing.png"])

        assert stub_loader.calls == ["red.png", "missing.png"]
        assert cache.peek("red.png").width == 10
        assert "missing.png" in cache
        with pytest.raises(ResourceAcquisitionError):
            cache.get("missing.png")
