"""Comparison module - text, vocabulary and pixel differencing."""
