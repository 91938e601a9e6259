"""Visualization module - glyph and markup highlighting."""
