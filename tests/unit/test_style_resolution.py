"""
Unit Tests for Style Resolution
===============================

Tests for style models, padding shorthands and the inheritance cascade.
"""

import pytest
from pydantic import ValidationError

from pixeltree.core.layout.style import (
    INHERITANCE_POLICY,
    TRANSPARENT,
    base_defaults,
    is_inherited,
    partially_resolve,
    resolve_style,
)
from pixeltree.models.style import (
    Alignment,
    ComponentStyle,
    Edges,
    RawComponentStyle,
    StackDirection,
)


def full_raw_style() -> RawComponentStyle:
    return RawComponentStyle(
        width=120,
        height=80,
        padding=Edges(top=1, right=2, bottom=3, left=4),
        direction=StackDirection.HORIZONTAL,
        spacing=6,
        align=Alignment.END,
        vertical_align=Alignment.CENTER,
        background="#112233",
        color="#445566",
        font_size=20,
        font_family="default",
        opacity=0.5,
    )


def parent_style(**overrides) -> ComponentStyle:
    values = {
        **base_defaults(),
        "width": 300.0,
        "height": 200.0,
        "padding": Edges.uniform(12),
        "direction": StackDirection.HORIZONTAL,
        "spacing": 9.0,
        "background": "#ff0000",
        "align": Alignment.CENTER,
        "vertical_align": Alignment.END,
        "color": "#00ff00",
        "font_size": 32.0,
        "font_family": "parent-font",
        "opacity": 0.25,
    }
    values.update(overrides)
    return ComponentStyle(**values)


def defaults(width: float = 10.0, height: float = 10.0):
    return {**base_defaults(), "width": width, "height": height}


class TestEdges:
    """Test padding edges and shorthands."""

    def test_uniform_number(self):
        edges = Edges.coerce(5)
        assert edges == Edges(top=5, right=5, bottom=5, left=5)
        assert edges.horizontal == 10
        assert edges.vertical == 10

    def test_two_value_shorthand(self):
        edges = Edges.coerce([10, 20])
        assert (edges.top, edges.right, edges.bottom, edges.left) == (10, 20, 10, 20)

    def test_four_value_shorthand(self):
        edges = Edges.coerce([1, 2, 3, 4])
        assert (edges.top, edges.right, edges.bottom, edges.left) == (1, 2, 3, 4)

    def test_mapping(self):
        edges = Edges.coerce({"left": 7})
        assert edges.left == 7
        assert edges.top == 0

    @pytest.mark.parametrize("value", [[1, 2, 3], True, "10px"])
    def test_unsupported_shorthand(self, value):
        with pytest.raises(ValueError):
            Edges.coerce(value)

    def test_negative_edges_rejected(self):
        with pytest.raises(ValidationError):
            Edges(top=-1)


class TestRawComponentStyle:
    """Test raw style validation."""

    def test_empty_style_is_unset(self):
        raw = RawComponentStyle()
        assert raw.width is None
        assert raw.padding is None
        assert raw.is_fully_specified() is False

    def test_full_style_is_fully_specified(self):
        assert full_raw_style().is_fully_specified() is True

    def test_aliases_accepted(self):
        raw = RawComponentStyle.model_validate(
            {"verticalAlign": "center", "fontSize": 12, "fontFamily": "default"}
        )
        assert raw.vertical_align == Alignment.CENTER
        assert raw.font_size == 12
        assert raw.font_family == "default"

    def test_padding_shorthand_coerced(self):
        raw = RawComponentStyle(padding=[4, 8])
        assert raw.padding == Edges.symmetric(4, 8)

    def test_invalid_color_rejected(self):
        with pytest.raises(ValidationError):
            RawComponentStyle(color="not-a-color")

    def test_opacity_range(self):
        with pytest.raises(ValidationError):
            RawComponentStyle(opacity=1.5)

    def test_alignment_factors(self):
        assert Alignment.START.factor == 0.0
        assert Alignment.CENTER.factor == 0.5
        assert Alignment.END.factor == 1.0


class TestResolveStyle:
    """Test the cascading merge of raw, parent and default styles."""

    def test_fully_specified_style_resolves_to_itself(self):
        raw = full_raw_style()
        resolved = resolve_style(raw, parent_style(), defaults())

        for name in INHERITANCE_POLICY:
            assert getattr(resolved, name) == getattr(raw, name), name

    def test_root_uses_defaults(self):
        resolved = resolve_style(RawComponentStyle(), None, defaults(40, 30))

        assert resolved.width == 40
        assert resolved.height == 30
        assert resolved.padding == Edges()
        assert resolved.direction == StackDirection.VERTICAL
        assert resolved.align == Alignment.START
        assert resolved.background == TRANSPARENT
        assert resolved.opacity == 1.0

    def test_inherited_attributes_come_from_parent(self):
        parent = parent_style()
        resolved = resolve_style(RawComponentStyle(), parent, defaults())

        assert resolved.align == parent.align
        assert resolved.vertical_align == parent.vertical_align
        assert resolved.color == parent.color
        assert resolved.font_size == parent.font_size
        assert resolved.font_family == parent.font_family

    def test_non_inherited_attributes_use_defaults(self):
        resolved = resolve_style(RawComponentStyle(), parent_style(), defaults(15, 25))

        assert (resolved.width, resolved.height) == (15, 25)
        assert resolved.padding == Edges()
        assert resolved.direction == StackDirection.VERTICAL
        assert resolved.spacing == 0
        assert resolved.background == TRANSPARENT
        assert resolved.opacity == 1.0

    def test_raw_value_wins_over_parent(self):
        raw = RawComponentStyle(color="#0000ff", align=Alignment.START)
        resolved = resolve_style(raw, parent_style(), defaults())

        assert resolved.color == "#0000ff"
        assert resolved.align == Alignment.START

    def test_missing_defaults_rejected(self):
        incomplete = base_defaults()
        with pytest.raises(ValueError, match="width"):
            resolve_style(RawComponentStyle(), None, incomplete)

    def test_policy_lookup(self):
        assert is_inherited("color") is True
        assert is_inherited("padding") is False
        with pytest.raises(ValueError):
            is_inherited("margin")

    def test_partially_resolve_single_attribute(self):
        parent = parent_style()
        assert partially_resolve(RawComponentStyle(), parent, "font_size") == 32.0
        assert partially_resolve(RawComponentStyle(fontSize=10), parent, "font_size") == 10
        assert partially_resolve(RawComponentStyle(), None, "font_family") == "default"

    def test_content_size_subtracts_padding(self):
        style = parent_style(width=100.0, height=50.0, padding=Edges(top=5, right=10, bottom=5, left=10))
        assert style.content_size() == (80.0, 40.0)
