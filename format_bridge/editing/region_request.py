"""
Region types and the builder that turns them into formatter arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from .document import Document
from .errors import OutOfRange, StalePosition
from .positions import ByteOffset, Exactness, TextPosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineRange:
    """Inclusive, 1-based line span."""
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start_line < 1:
            raise ValueError(f"line numbers start at 1, got {self.start_line}")
        if self.end_line < self.start_line:
            raise ValueError(
                f"line range end {self.end_line} before start {self.start_line}"
            )


@dataclass(frozen=True)
class TextRange:
    """Span of the live document, end exclusive.  May be empty."""
    start: TextPosition
    end: TextPosition

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"text range end {self.end.index} before start {self.start.index}"
            )


@dataclass(frozen=True)
class ByteRange:
    """Span of the encoded document, end exclusive.  May be empty."""
    start: ByteOffset
    end: ByteOffset

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"byte range end {self.end.value} before start {self.start.value}"
            )

    @property
    def length(self) -> int:
        return self.end - self.start


Region = Union[LineRange, TextRange]


def selection_from_bytes(document: Document, start: int, end: int) -> TextRange:
    """Map a byte selection reported by an editor onto the document.

    The endpoints are snapped to the nearest character boundary: a selection
    that is a byte or two off still names the right text.
    """
    pmap = document.position_map()
    return TextRange(
        pmap.to_text_position(ByteOffset(start), Exactness.APPROXIMATE),
        pmap.to_text_position(ByteOffset(end), Exactness.APPROXIMATE),
    )


class RegionRequestBuilder:
    """Translate regions into the formatter's region arguments."""

    def build(
        self,
        regions: Sequence[Region],
        by_line: bool,
        document: Document,
    ) -> list[str]:
        """Return ``-lines=`` or ``-offset=``/``-length=`` arguments.

        Raises
        ------
        StalePosition
            A text range points outside the current document.  No
            arguments are returned in that case.
        """
        if by_line:
            return [f"-lines={r.start_line}:{r.end_line}"
                    for r in self._expect(regions, LineRange)]

        args: list[str] = []
        for byte_range in self.to_byte_ranges(regions, document):
            args.append(f"-offset={byte_range.start.value}")
            args.append(f"-length={byte_range.length}")
        return args

    def to_byte_ranges(
        self,
        regions: Sequence[Region],
        document: Document,
    ) -> list[ByteRange]:
        pmap = document.position_map()
        byte_ranges: list[ByteRange] = []
        for region in self._expect(regions, TextRange):
            try:
                byte_ranges.append(ByteRange(
                    pmap.to_byte_offset(region.start),
                    pmap.to_byte_offset(region.end),
                ))
            except OutOfRange as exc:
                logger.warning(
                    "[Format] Region %d..%d no longer in document: %s",
                    region.start.index, region.end.index, exc,
                )
                raise StalePosition(
                    f"region {region.start.index}..{region.end.index} is "
                    f"outside the document ({len(pmap.text)} characters)"
                ) from exc
        return byte_ranges

    @staticmethod
    def _expect(regions: Sequence[Region], kind: type) -> Sequence:
        for region in regions:
            if not isinstance(region, kind):
                raise ValueError(
                    f"expected only {kind.__name__} regions, got "
                    f"{type(region).__name__}"
                )
        return regions
