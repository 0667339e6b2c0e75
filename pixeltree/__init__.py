"""
pixeltree
=========

Compose raster images from a declarative tree of drawable components.

This package provides:
- Style model with cascading resolution (raw vs resolved styles)
- Box-model layout that stacks, pads and aligns components
- A depth-first, fail-fast render pipeline over a shared RGBA canvas
- Image, text, shape and container components
- JSON/YAML documents that describe component trees
"""

__version__ = "1.0.0"
__author__ = "pixeltree Team"
