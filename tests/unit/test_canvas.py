"""
Unit Tests for Canvas
=====================

Tests for color handling, compositing and the canvas bounds policy.
"""

import pytest
from PIL import Image

from pixeltree.core.errors import GeometryError
from pixeltree.core.layout.geometry import Rect
from pixeltree.core.rendering.canvas import Canvas, apply_opacity, to_rgba

from tests.utils.mocks import solid_image

RED = (255, 0, 0, 255)
CLEAR = (0, 0, 0, 0)


class TestColors:
    """Test color parsing helpers."""

    def test_named_and_hex_colors(self):
        assert to_rgba("red") == RED
        assert to_rgba("#00ff00") == (0, 255, 0, 255)
        assert to_rgba("#0000ff80") == (0, 0, 255, 128)

    def test_opacity_folds_into_alpha(self):
        assert to_rgba("#ff000080", 0.5) == (255, 0, 0, 64)

    def test_apply_opacity_scales_alpha_channel(self):
        layer = Image.new("RGBA", (2, 2), RED)
        faded = apply_opacity(layer, 0.5)

        assert faded.getpixel((0, 0)) == (255, 0, 0, 128)
        assert layer.getpixel((0, 0)) == RED


class TestCanvas:
    """Test canvas creation and drawing operations."""

    def test_initial_background(self):
        canvas = Canvas(4, 3, background="#ffffff")
        assert (canvas.width, canvas.height) == (4, 3)
        assert canvas.pixel(3, 2) == (255, 255, 255, 255)
        assert len(canvas.to_rgba_bytes()) == 4 * 3 * 4

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_non_positive_size_rejected(self, size):
        with pytest.raises(GeometryError):
            Canvas(*size)

    def test_for_scale(self):
        canvas = Canvas.for_scale(100, 50, 2.0)
        assert (canvas.width, canvas.height) == (200, 100)
        assert canvas.bounds == Rect(width=200, height=100)

    def test_image_is_a_copy(self):
        canvas = Canvas(5, 5)
        snapshot = canvas.image
        snapshot.putpixel((0, 0), RED)
        assert canvas.pixel(0, 0) == CLEAR

    def test_fill_rect_only_touches_its_region(self):
        canvas = Canvas(50, 50)
        canvas.fill_rect(Rect(x=10, y=10, width=20, height=20), "red")

        assert canvas.pixel(15, 15) == RED
        assert canvas.pixel(5, 5) == CLEAR
        assert canvas.image.getbbox() == (10, 10, 30, 30)

    def test_fully_transparent_fill_is_skipped(self):
        canvas = Canvas(10, 10)
        canvas.fill_rect(Rect(width=10, height=10), "#00000000")
        assert canvas.image.getbbox() is None

    def test_fill_ellipse_leaves_corners_clear(self):
        canvas = Canvas(40, 40)
        canvas.fill_ellipse(Rect(width=40, height=40), "red")

        assert canvas.pixel(20, 20) == RED
        assert canvas.pixel(0, 0) == CLEAR

    def test_write_outside_canvas_raises(self):
        canvas = Canvas(100, 100)
        with pytest.raises(GeometryError):
            canvas.fill_rect(Rect(x=90, y=90, width=20, height=20), "red")
        assert canvas.image.getbbox() is None

    def test_clipping_canvas_drops_outside_part(self):
        canvas = Canvas(100, 100, clip=True)
        canvas.fill_rect(Rect(x=90, y=90, width=20, height=20), "red")

        assert canvas.pixel(95, 95) == RED
        assert canvas.image.getbbox() == (90, 90, 100, 100)

    def test_clipping_canvas_ignores_fully_outside_write(self):
        canvas = Canvas(10, 10, clip=True)
        canvas.fill_rect(Rect(x=20, y=20, width=5, height=5), "red")
        assert canvas.image.getbbox() is None

    def test_composite_with_scale_and_opacity(self):
        canvas = Canvas(30, 30)
        canvas.composite(solid_image(5, 5), 2, 3, scale=2.0, opacity=0.5)

        assert canvas.image.getbbox() == (2, 3, 12, 13)
        red, _, _, alpha = canvas.pixel(5, 5)
        assert abs(alpha - 128) <= 1
        assert red >= 250

    def test_composite_rejects_empty_scale(self):
        canvas = Canvas(10, 10)
        with pytest.raises(GeometryError):
            canvas.composite(solid_image(2, 2), 0, 0, scale=0.1)

    def test_composite_blends_over_existing_pixels(self):
        canvas = Canvas(4, 4, background="#0000ff")
        canvas.composite(solid_image(4, 4, (255, 0, 0, 0)), 0, 0)
        assert canvas.pixel(1, 1) == (0, 0, 255, 255)

    def test_draw_image_stretches_to_rect(self):
        canvas = Canvas(50, 50)
        canvas.draw_image(solid_image(10, 10), Rect(x=5, y=5, width=20, height=30))

        assert canvas.image.getbbox() == (5, 5, 25, 35)
        assert canvas.pixel(20, 30)[0] >= 250

    def test_draw_image_rejects_empty_target(self):
        canvas = Canvas(10, 10)
        with pytest.raises(GeometryError):
            canvas.draw_image(solid_image(2, 2), Rect(width=0, height=5))
