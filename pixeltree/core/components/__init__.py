"""
Components Module
=================

Drawable component kinds.

Components:
- base: The abstract component contract
- container: Layout groups with optional background
- image: Image resources fitted into their box
- text: Single and multi-line text
- shape: Rectangles and ellipses
"""

from pixeltree.core.components.base import Component
from pixeltree.core.components.container import Container
from pixeltree.core.components.image import ImageComponent
from pixeltree.core.components.shape import EllipseComponent, RectComponent
from pixeltree.core.components.text import TextComponent

__all__ = [
    "Component",
    "Container",
    "ImageComponent",
    "TextComponent",
    "RectComponent",
    "EllipseComponent",
]
