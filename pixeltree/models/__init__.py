"""
Data Models
===========

Pydantic data models for styles, documents and render results.

Models:
- style: Raw and resolved component styles, edges and alignment enums
- schemas: Document, render option and result models
"""
