"""
Unit Tests for Tree Builder
===========================

Tests for turning document elements into component trees.
"""

import pytest

from pixeltree.core.components import (
    Container,
    EllipseComponent,
    ImageComponent,
    RectComponent,
    TextComponent,
)
from pixeltree.core.dsl import builder
from pixeltree.core.dsl.builder import build_component, build_tree, register_component
from pixeltree.models.schemas import ComponentKind, DSLDocument, DSLElement, ImageFit

from tests.utils.data_generators import DocumentDataGenerator


class TestBuildComponent:
    """Test element to component conversion."""

    def test_builds_every_kind(self):
        document = DSLDocument.model_validate(DocumentDataGenerator.generate_nested_layout())
        root = build_component(document.root)

        assert isinstance(root, Container)
        row, footer = root.children()
        assert isinstance(row, Container)
        assert isinstance(footer, TextComponent)
        assert footer.text == "Footer"
        assert [type(c) for c in row.children()] == [RectComponent, EllipseComponent]
        assert [c.label for c in root.walk()] == ["column", "row", "a", "b", "footer"]

    def test_image_properties(self):
        element = DSLElement(type=ComponentKind.IMAGE, src="logo.png", fit=ImageFit.COVER, id="logo")
        image = build_component(element)

        assert isinstance(image, ImageComponent)
        assert image.src == "logo.png"
        assert image.fit == ImageFit.COVER
        assert image.label == "logo"

    def test_image_without_source(self):
        with pytest.raises(ValueError):
            build_component(DSLElement(type=ComponentKind.IMAGE))

    def test_shape_properties(self):
        rect = build_component(DSLElement(type=ComponentKind.RECT, fill="#ff0000", radius=3))

        assert isinstance(rect, RectComponent)
        assert rect.fill == "#ff0000"
        assert rect.radius == 3

    def test_styles_are_carried_over(self):
        element = DSLElement.model_validate(
            {"type": "text", "text": "hi", "style": {"fontSize": 30, "color": "#123456"}}
        )
        text = build_component(element)

        assert text.style().font_size == 30
        assert text.style().color == "#123456"

    def test_register_component(self, monkeypatch):
        monkeypatch.setattr(builder, "_FACTORIES", dict(builder._FACTORIES))

        def factory(element, children):
            return RectComponent(fill="#00ff00", style=element.style, label="custom")

        register_component(ComponentKind.ELLIPSE, factory)
        component = build_component(DSLElement(type=ComponentKind.ELLIPSE))

        assert isinstance(component, RectComponent)
        assert component.label == "custom"


class TestBuildTree:
    """Test document-level tree building."""

    def test_unsized_root_container_fills_document(self):
        document = DSLDocument.model_validate(
            {"width": 320, "height": 200, "root": {"type": "container"}}
        )
        root = build_tree(document)

        assert (root.style().width, root.style().height) == (320, 200)
        assert document.root.style.width is None

    def test_declared_root_size_kept(self):
        document = DSLDocument.model_validate(
            {"width": 320, "height": 200, "root": {"type": "container", "style": {"width": 50}}}
        )
        root = build_tree(document)

        assert (root.style().width, root.style().height) == (50, 200)

    def test_leaf_root_not_resized(self):
        document = DSLDocument.model_validate({"root": {"type": "text", "text": "hi"}})
        root = build_tree(document)

        assert root.style().width is None
