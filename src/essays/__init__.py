"""Compose long-form essays from typed content blocks into HTML pages."""

__version__ = "0.1.0"
