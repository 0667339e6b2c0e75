"""
Test Suite
==========

Test suite matching the pixeltree/ package structure.

Test Categories:
- unit: Unit tests for individual modules
- integration: Parsing, rendering and export working together
"""
