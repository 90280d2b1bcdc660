"""glyphbake - TrueType glyph atlas baker and batched bitmap text renderer."""

__version__ = "0.1.0"
