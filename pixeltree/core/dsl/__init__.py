"""
Document Module
===============

JSON/YAML documents that describe component trees.

Components:
- parser: Syntax parsing and schema validation
- builder: Conversion of validated documents into component trees
"""
