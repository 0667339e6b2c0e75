"""
Layout Module
=============

Style cascade and box-model placement.

Components:
- style: Inheritance policy table and style resolution
- geometry: Rectangles in logical and device pixels
- engine: Stacking, padding and alignment of children
"""
