"""
Replacement report parser — turns the formatter's XML output into an
ordered list of byte-addressed edits.

Expected shape::

    <?xml version='1.0'?>
    <replacements xml:space='preserve' incomplete_format='false'>
    <cursor>12</cursor>
    <replacement offset='5' length='1'> = </replacement>
    </replacements>
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from lxml import etree

from .errors import MalformedReport
from .positions import ByteOffset

logger = logging.getLogger(__name__)

_ROOT_TAG = "replacements"
_REPLACEMENT_TAG = "replacement"
_CURSOR_TAG = "cursor"
_INCOMPLETE_ATTR = "incomplete_format"
_NUMBER = re.compile(r"^\s*\d+\s*$")


@dataclass(frozen=True)
class Edit:
    """Delete ``length`` bytes at ``offset`` and insert ``text`` there."""
    offset: ByteOffset
    length: int
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"edit length must be >= 0, got {self.length}")

    @property
    def end(self) -> ByteOffset:
        return self.offset + self.length


@dataclass(frozen=True)
class ReplacementReport:
    """Parsed formatter output, edits in application order."""
    edits: tuple[Edit, ...] = ()
    cursor: Optional[ByteOffset] = None
    incomplete: bool = False


def sort_edits(edits: list[Edit]) -> list[Edit]:
    """Order edits so each one addresses text no earlier edit has moved.

    Descending offset, and for equal offsets descending length.  Edits
    that tie on both (stacked insertions) are reversed, so inserting each
    at the same spot leaves their texts in report order.
    """
    ranked = sorted(
        enumerate(edits),
        key=lambda item: (item[1].offset.value, item[1].length, item[0]),
        reverse=True,
    )
    return [edit for _, edit in ranked]


def is_sorted(edits: Sequence[Edit]) -> bool:
    """True if *edits* are in the application order :func:`sort_edits` gives."""
    return all(
        (later.offset.value, later.length) <= (earlier.offset.value, earlier.length)
        for earlier, later in zip(edits, edits[1:])
    )


class ReplacementReportParser:
    """Strict parser for ``-output-replacements-xml`` reports."""

    def __init__(self) -> None:
        self._xml_parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
        )

    def parse(self, data: bytes) -> ReplacementReport:
        """Parse *data* into a :class:`ReplacementReport`.

        Raises
        ------
        MalformedReport
            On any deviation from the expected shape; nothing is returned
            for a partially valid report.
        """
        if not data.strip():
            raise MalformedReport("formatter produced no output")

        try:
            root = etree.fromstring(data, self._xml_parser)
        except etree.XMLSyntaxError as exc:
            raise MalformedReport(f"not well-formed XML: {exc}") from exc

        if root.tag != _ROOT_TAG:
            raise MalformedReport(
                f"expected <{_ROOT_TAG}> root element, got <{root.tag}>"
            )

        edits: list[Edit] = []
        cursor: Optional[ByteOffset] = None

        for node in root:
            if node.tag == _REPLACEMENT_TAG:
                edits.append(self._parse_replacement(node))
            elif node.tag == _CURSOR_TAG:
                cursor = ByteOffset(self._number(node.text, "<cursor> value"))
            else:
                raise MalformedReport(f"unexpected element <{node.tag}>")

        ordered = sort_edits(edits)
        self._check_overlaps(ordered)

        incomplete = root.get(_INCOMPLETE_ATTR) == "true"
        logger.debug(
            "[Report] %d edit(s), cursor=%s, incomplete=%s",
            len(ordered), cursor.value if cursor else None, incomplete,
        )
        return ReplacementReport(tuple(ordered), cursor, incomplete)

    # ------------------------------------------------------------------
    # Internal parsing
    # ------------------------------------------------------------------

    def _parse_replacement(self, node) -> Edit:
        offset = node.get("offset")
        length = node.get("length")
        if offset is None or length is None:
            raise MalformedReport(
                "<replacement> needs both offset and length attributes "
                f"(line {node.sourceline})"
            )
        if len(node):
            raise MalformedReport(
                "<replacement> has more than one text payload "
                f"(line {node.sourceline})"
            )

        return Edit(
            offset=ByteOffset(self._number(offset, "replacement offset")),
            length=self._number(length, "replacement length"),
            text=node.text,
        )

    @staticmethod
    def _number(raw: Optional[str], what: str) -> int:
        if raw is None or not _NUMBER.match(raw):
            raise MalformedReport(f"{what} is not a non-negative integer: {raw!r}")
        return int(raw)

    @staticmethod
    def _check_overlaps(ordered: list[Edit]) -> None:
        for later, earlier in zip(ordered[1:], ordered):
            if later.end > earlier.offset:
                raise MalformedReport(
                    f"replacement at {later.offset.value} (length {later.length}) "
                    f"overlaps replacement at {earlier.offset.value} "
                    f"(length {earlier.length})"
                )
