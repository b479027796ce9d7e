"""Byte-level conversion between supported media types."""

from fragments.conversion.engine import ConversionEngine
from fragments.conversion.images import convert_image
from fragments.conversion.text import markdown_to_html, strip_tags

__all__ = [
    "ConversionEngine",
    "convert_image",
    "markdown_to_html",
    "strip_tags",
]
