"""
format_bridge — merge an external formatter's edits into a live document.

Public API for library usage::

    from format_bridge import TextDocument, format_regions, LineRange

    doc = TextDocument(source, path="main.cc")
    result = format_regions(doc, [LineRange(10, 20)], by_line=True)
"""

from .api import (
    FormatResult, PatchSession,
    format_regions, format_whole_document, format_changed_regions,
)
from .editing import (
    TextDocument, LineRange, TextRange, TextPosition, ByteOffset, FormatError,
)

__all__ = [
    "FormatResult", "PatchSession",
    "format_regions", "format_whole_document", "format_changed_regions",
    "TextDocument", "LineRange", "TextRange", "TextPosition", "ByteOffset",
    "FormatError",
]
