"""Baked font descriptor model and its BMFont codecs."""

from glyphbake.descriptor.model import FontDescriptor, GlyphMetrics
from glyphbake.descriptor.codec import (
    parse,
    serialize,
    parse_json,
    serialize_json,
    parse_text,
    serialize_text,
)

__all__ = [
    "FontDescriptor",
    "GlyphMetrics",
    "parse",
    "serialize",
    "parse_json",
    "serialize_json",
    "parse_text",
    "serialize_text",
]
