"""
Coordinate types and translation between byte offsets and text positions.

The formatter and git speak in byte offsets into the encoded file, while the
in-memory document is addressed by character index.  The two are kept as
separate types so that one can never be passed where the other is expected;
:class:`PositionMap` is the only way to convert between them.
"""

from __future__ import annotations

import codecs
import enum
from bisect import bisect_left
from dataclasses import dataclass
from itertools import accumulate
from typing import Sequence

from .errors import MisalignedOffset, OutOfRange

# Codecs in which every ASCII character is exactly one byte
_ASCII_COMPATIBLE = {"utf-8", "ascii", "latin-1", "iso8859-1", "cp1252"}


@dataclass(frozen=True, order=True)
class ByteOffset:
    """Zero-based offset into the encoded, newline-normalized document."""
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"ByteOffset needs an int, got {self.value!r}")
        if self.value < 0:
            raise OutOfRange(f"negative byte offset {self.value}")

    def __add__(self, length: int) -> "ByteOffset":
        if not isinstance(length, int):
            return NotImplemented
        return ByteOffset(self.value + length)

    def __sub__(self, other: "ByteOffset") -> int:
        if not isinstance(other, ByteOffset):
            return NotImplemented
        return self.value - other.value


@dataclass(frozen=True, order=True)
class TextPosition:
    """Zero-based character index into the document text."""
    index: int

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError(f"TextPosition needs an int, got {self.index!r}")
        if self.index < 0:
            raise OutOfRange(f"negative text position {self.index}")


class Exactness(enum.Enum):
    """How strictly a byte offset must line up with a character boundary."""
    EXACT = "exact"
    APPROXIMATE = "approximate"


def check_encoding(encoding: str) -> str:
    """Return the normalized codec name, rejecting codecs unfit for offsets.

    A codec that writes a byte-order mark (``utf-16``, ``utf-8-sig``, ...)
    would count the mark once per character, so it is refused.
    """
    try:
        info = codecs.lookup(encoding)
    except LookupError as exc:
        raise ValueError(f"unknown encoding {encoding!r}") from exc
    if info.encode("")[0]:
        raise ValueError(
            f"encoding {encoding!r} writes a byte-order mark; use a BOM-free "
            f"variant such as utf-16-le"
        )
    return info.name


class PositionMap:
    """Translation table for one snapshot of a document's text.

    ``_starts[i]`` is the byte offset at which character ``i`` begins;
    the final entry is the total encoded length.
    """

    def __init__(self, text: str, encoding: str = "utf-8") -> None:
        codec = check_encoding(encoding)
        self._text = text
        self._encoding = encoding
        self._starts = self._build_starts(text, codec)

    @staticmethod
    def _build_starts(text: str, codec: str) -> Sequence[int]:
        if text.isascii() and codec in _ASCII_COMPATIBLE:
            return range(len(text) + 1)

        widths: dict[str, int] = {}
        for ch in set(text):
            widths[ch] = len(ch.encode(codec))
        return [0, *accumulate(widths[ch] for ch in text)]

    @property
    def text(self) -> str:
        return self._text

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def byte_length(self) -> int:
        return self._starts[-1]

    def to_byte_offset(self, position: TextPosition) -> ByteOffset:
        """Return the number of encoded bytes strictly before *position*."""
        if position.index > len(self._text):
            raise OutOfRange(
                f"text position {position.index} beyond end of document "
                f"({len(self._text)} characters)"
            )
        return ByteOffset(self._starts[position.index])

    def to_text_position(
        self,
        offset: ByteOffset,
        exactness: Exactness = Exactness.EXACT,
    ) -> TextPosition:
        """Return the position whose preceding byte count equals *offset*.

        With :attr:`Exactness.EXACT` an offset inside a multi-byte character
        raises :class:`MisalignedOffset`; with :attr:`Exactness.APPROXIMATE`
        it snaps to the nearest character boundary (the lower one on a tie).
        """
        value = offset.value
        if value > self.byte_length:
            raise OutOfRange(
                f"byte offset {value} beyond end of document "
                f"({self.byte_length} bytes)"
            )

        index = bisect_left(self._starts, value)
        if self._starts[index] == value:
            return TextPosition(index)

        if exactness is Exactness.EXACT:
            raise MisalignedOffset(
                f"byte offset {value} falls inside character {index - 1}"
            )

        below = self._starts[index - 1]
        above = self._starts[index]
        if value - below <= above - value:
            return TextPosition(index - 1)
        return TextPosition(index)
