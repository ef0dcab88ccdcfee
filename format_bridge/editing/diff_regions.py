"""
Diff region extractor — reads the hunk headers of a zero-context unified
diff and returns the changed line ranges of the new file.
"""

from __future__ import annotations

import logging
import re

from .region_request import LineRange

logger = logging.getLogger(__name__)

# Patterns
_HUNK_HEADER = re.compile(
    r"^@@ -\d+(?:,\d+)? \+(?P<start>\d+)(?:,(?P<length>\d+))? @@"
)


class DiffRegionExtractor:
    """Collect changed line ranges from unified diff hunk headers."""

    def extract(self, diff_text: str) -> list[LineRange]:
        """Return the changed 1-based line ranges in the new file.

        Parameters
        ----------
        diff_text:
            Unified diff output, ideally produced with ``-U0``.

        Returns
        -------
        list[LineRange]
            Ranges in first-seen order with duplicates removed.
        """
        ranges: dict[LineRange, None] = {}

        for line in diff_text.splitlines():
            if not line.startswith("@@"):
                continue

            match = _HUNK_HEADER.match(line)
            if match is None:
                logger.debug("[Diff] Skipping unrecognized hunk header: %r", line)
                continue

            region = self._region_for_hunk(
                int(match.group("start")),
                int(match.group("length") or 1),
            )
            ranges.setdefault(region, None)

        logger.debug("[Diff] %d changed line range(s)", len(ranges))
        return list(ranges)

    @staticmethod
    def _region_for_hunk(start: int, length: int) -> LineRange:
        if length > 0:
            return LineRange(start, start + length - 1)

        # Pure deletion: nothing left in the new file except the line the
        # removed text used to follow, or the new first line.
        return LineRange(max(start, 1), max(start, 1))
