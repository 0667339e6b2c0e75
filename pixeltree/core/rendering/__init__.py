"""
Rendering Module
===============

Canvas, render context and the draw pass.

Components:
- canvas: RGBA raster with bounds-checked compositing
- context: Pass-wide render context and per-node render params
- resources: Resource loading contract, file loader and preloading cache
- pipeline: Depth-first, fail-fast render traversal
- exporter: PNG serialization of finished canvases
"""
