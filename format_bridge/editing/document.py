"""
Text store abstraction the patch pipeline operates on.

Editor integrations implement :class:`Document` over their own buffer type;
:class:`TextDocument` is the in-memory implementation used by the CLI and
the tests.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol, runtime_checkable

from .errors import OutOfRange
from .positions import PositionMap, TextPosition, check_encoding

logger = logging.getLogger(__name__)


def _detect_newline(text: str) -> str:
    """Return the most common line ending in *text*, ``\\n`` if it has none."""
    crlf = text.count("\r\n")
    counts = {
        "\r\n": crlf,
        "\r": text.count("\r") - crlf,
        "\n": text.count("\n") - crlf,
    }
    best = max(counts, key=counts.get)
    return best if counts[best] else "\n"


@runtime_checkable
class Document(Protocol):
    """Mutable text addressed by :class:`TextPosition`."""

    path: Optional[str]
    encoding: str

    @property
    def text(self) -> str:
        ...

    @property
    def cursor(self) -> TextPosition:
        ...

    def move_cursor(self, position: TextPosition) -> None:
        ...

    def delete(self, start: TextPosition, end: TextPosition) -> None:
        ...

    def insert(self, position: TextPosition, text: str) -> None:
        ...

    def position_map(self) -> PositionMap:
        """Return a translation table for the current text."""
        ...


class TextDocument:
    """In-memory document with a cursor that follows edits like a marker.

    Text is kept newline-normalized (``\\n`` only); it is encoded with
    ``encoding`` whenever byte offsets are involved.  The line ending the
    text arrived with is remembered in ``newline`` and restored by
    :meth:`save`.
    """

    def __init__(
        self,
        text: str = "",
        *,
        cursor: int = 0,
        path: Optional[str] = None,
        encoding: str = "utf-8",
        newline: Optional[str] = None,
    ) -> None:
        check_encoding(encoding)
        self.newline = newline or _detect_newline(text)
        self._text = text.replace("\r\n", "\n").replace("\r", "\n")
        self.path = path
        self.encoding = encoding
        self._map: Optional[PositionMap] = None
        self._cursor = TextPosition(0)
        self.move_cursor(TextPosition(cursor))

    @classmethod
    def from_file(cls, path: str, encoding: str = "utf-8",
                  cursor: int = 0) -> "TextDocument":
        with open(path, "r", encoding=encoding, newline="") as f:
            text = f.read()
        return cls(text, cursor=cursor, path=os.path.abspath(path),
                   encoding=encoding)

    def save(self, path: Optional[str] = None) -> None:
        target = path or self.path
        if not target:
            raise ValueError("Document has no path to save to")
        with open(target, "w", encoding=self.encoding, newline=self.newline) as f:
            f.write(self._text)
        logger.debug("[Document] Saved %d chars to %s", len(self._text), target)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> TextPosition:
        return self._cursor

    def encoded(self) -> bytes:
        return self._text.encode(self.encoding)

    def position_map(self) -> PositionMap:
        if self._map is None:
            self._map = PositionMap(self._text, self.encoding)
        return self._map

    def move_cursor(self, position: TextPosition) -> None:
        self._check(position)
        self._cursor = position

    def delete(self, start: TextPosition, end: TextPosition) -> None:
        self._check(start)
        self._check(end)
        if end < start:
            raise ValueError(f"delete end {end.index} before start {start.index}")
        removed = end.index - start.index
        if not removed:
            return
        self._text = self._text[:start.index] + self._text[end.index:]
        self._map = None

        if self._cursor.index >= end.index:
            self._cursor = TextPosition(self._cursor.index - removed)
        elif self._cursor.index > start.index:
            self._cursor = start

    def insert(self, position: TextPosition, text: str) -> None:
        self._check(position)
        if not text:
            return
        self._text = self._text[:position.index] + text + self._text[position.index:]
        self._map = None

        if self._cursor.index > position.index:
            self._cursor = TextPosition(self._cursor.index + len(text))

    def _check(self, position: TextPosition) -> None:
        if position.index > len(self._text):
            raise OutOfRange(
                f"text position {position.index} beyond end of document "
                f"({len(self._text)} characters)"
            )

    def __repr__(self) -> str:
        return (f"TextDocument(path={self.path!r}, chars={len(self._text)}, "
                f"cursor={self._cursor.index})")
