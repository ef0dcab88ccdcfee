"""
Patch applier — applies byte-addressed edits to a live document and
relocates its cursor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .document import Document
from .errors import PatchApplicationError, PositionError
from .positions import ByteOffset, Exactness, TextPosition
from .report_parser import Edit, is_sorted

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Result of applying an edit list."""
    edits_applied: int = 0
    cursor: Optional[TextPosition] = None
    cursor_moved: bool = False


class PatchApplier:
    """Apply sorted edits to a document as one logical transaction."""

    def apply(
        self,
        document: Document,
        edits: Sequence[Edit],
        cursor: Optional[ByteOffset] = None,
    ) -> ApplyResult:
        """Apply *edits* (descending offset order) and move the cursor.

        Edits are applied bottom-up, so every edit can be translated
        against the snapshot taken before the first one: nothing applied
        so far has touched the bytes below it.

        Parameters
        ----------
        document:
            The document to mutate.
        edits:
            Edits sorted by descending offset, then descending length.
        cursor:
            Cursor location in the byte space of the *edited* text.

        Raises
        ------
        PatchApplicationError
            An edit could not be translated.  Edits before it stay applied.
        """
        if not is_sorted(edits):
            raise ValueError("edits must be sorted by descending offset and length")

        result = ApplyResult()
        snapshot = document.position_map()

        for edit in edits:
            try:
                start = snapshot.to_text_position(edit.offset, Exactness.EXACT)
                end = snapshot.to_text_position(edit.end, Exactness.EXACT)
            except PositionError as exc:
                logger.error(
                    "[Patch] Edit at byte %d (length %d) cannot be placed, "
                    "stopping after %d of %d edits: %s",
                    edit.offset.value, edit.length, result.edits_applied,
                    len(edits), exc,
                )
                raise PatchApplicationError(
                    f"edit at byte {edit.offset.value} (length {edit.length}) "
                    f"does not fit the document: {exc}; "
                    f"{result.edits_applied} of {len(edits)} edits were applied",
                    edits_applied=result.edits_applied,
                ) from exc

            document.delete(start, end)
            if edit.text is not None:
                document.insert(start, edit.text)
            result.edits_applied += 1

        result.cursor = document.cursor
        if cursor is not None:
            self._place_cursor(document, cursor, result)
        return result

    @staticmethod
    def _place_cursor(
        document: Document,
        cursor: ByteOffset,
        result: ApplyResult,
    ) -> None:
        try:
            position = document.position_map().to_text_position(
                cursor, Exactness.EXACT
            )
        except PositionError as exc:
            logger.warning(
                "[Patch] Cursor offset %d does not fit the edited text, "
                "leaving cursor at %d: %s",
                cursor.value, document.cursor.index, exc,
            )
            return

        document.move_cursor(position)
        result.cursor = position
        result.cursor_moved = True
