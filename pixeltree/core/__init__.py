"""
Core Business Logic
==================

Core modules for component trees and raster rendering.

Modules:
- components: Drawable component kinds
- layout: Style resolution and box-model layout
- rendering: Canvas, render context, resources, pipeline and export
- dsl: JSON/YAML documents describing component trees
- renderer: High-level render entry points
"""
