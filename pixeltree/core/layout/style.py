"""
Style Resolution
================

Cascading merge of a component's raw style with its parent's resolved style
and type-level defaults. Which attributes inherit from the parent is an
explicit policy table, not a blanket rule.
"""

from typing import Dict, Optional, Any

from pixeltree.config.settings import get_settings
from pixeltree.models.style import (
    Alignment,
    ComponentStyle,
    Edges,
    RawComponentStyle,
    StackDirection,
)


# Attribute -> inherited from the parent's resolved style when unset.
INHERITANCE_POLICY: Dict[str, bool] = {
    "width": False,
    "height": False,
    "padding": False,
    "direction": False,
    "spacing": False,
    "background": False,
    "align": True,
    "vertical_align": True,
    "color": True,
    "font_size": True,
    "font_family": True,
    "opacity": False,
}

TRANSPARENT = "#00000000"


def base_defaults() -> Dict[str, Any]:
    """Fallback values for every attribute except the box size."""
    settings = get_settings()
    return {
        "padding": Edges(),
        "direction": StackDirection.VERTICAL,
        "spacing": 0.0,
        "background": TRANSPARENT,
        "align": Alignment.START,
        "vertical_align": Alignment.START,
        "color": "#000000",
        "font_size": settings.default_font_size,
        "font_family": settings.default_font_family,
        "opacity": 1.0,
    }


def is_inherited(attribute: str) -> bool:
    """Whether an attribute cascades from the parent when unset."""
    try:
        return INHERITANCE_POLICY[attribute]
    except KeyError:
        raise ValueError(f"Unknown style attribute: {attribute}") from None


def resolve_attribute(
    attribute: str,
    raw: RawComponentStyle,
    parent: Optional[ComponentStyle],
    defaults: Dict[str, Any],
) -> Any:
    value = getattr(raw, attribute)
    if value is not None:
        return value
    if parent is not None and is_inherited(attribute):
        return getattr(parent, attribute)
    return defaults[attribute]


def resolve_style(
    raw: RawComponentStyle,
    parent: Optional[ComponentStyle],
    defaults: Dict[str, Any],
) -> ComponentStyle:
    """
    Resolve a raw style into a fully specified one.

    Precedence per attribute: the raw value if set, then the parent's resolved
    value when the attribute is inherited, then the default.

    Args:
        raw: The component's own declared style
        parent: The parent's resolved style, ``None`` for the root
        defaults: Fallback value for every attribute (type-level defaults)

    Returns:
        ComponentStyle with no unset fields
    """
    missing = [name for name in INHERITANCE_POLICY if name not in defaults]
    if missing:
        raise ValueError(f"Missing style defaults for: {', '.join(missing)}")

    return ComponentStyle(
        **{
            name: resolve_attribute(name, raw, parent, defaults)
            for name in INHERITANCE_POLICY
        }
    )


def partially_resolve(
    raw: RawComponentStyle,
    parent: Optional[ComponentStyle],
    attribute: str,
) -> Any:
    """Resolve a single inherited attribute before box defaults are known."""
    return resolve_attribute(attribute, raw, parent, base_defaults())
