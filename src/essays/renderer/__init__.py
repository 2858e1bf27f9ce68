"""Renderer package."""

from .html_renderer import HTMLRenderer, RenderContext

__all__ = ["HTMLRenderer", "RenderContext"]
