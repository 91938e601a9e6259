"""Shared utilities: logging, timing, coordinates and tokenization."""
