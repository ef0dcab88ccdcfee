"""
Programmatic API — the three formatting operations editor integrations
call.

Example usage::

    from format_bridge import TextDocument, format_whole_document

    doc = TextDocument.from_file("src/main.cc")
    result = format_whole_document(doc, style="llvm")
    print(result.edits_applied, result.incomplete)
    doc.save()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import Config
from .editing.diff_regions import DiffRegionExtractor
from .editing.document import Document
from .editing.errors import StalePosition
from .editing.patch_applier import ApplyResult, PatchApplier
from .editing.positions import TextPosition
from .editing.region_request import Region, RegionRequestBuilder, TextRange
from .editing.report_parser import ReplacementReport, ReplacementReportParser
from .formatter import FormatterRunner
from . import git_utils

_logger = logging.getLogger(__name__)


@dataclass
class FormatResult:
    """Structured result returned by the formatting operations."""
    success: bool
    edits_applied: int = 0
    cursor: Optional[TextPosition] = None
    incomplete: bool = False
    formatter_ran: bool = True


@dataclass
class PatchSession:
    """One parsed report bound to the document it will be applied to."""
    document: Document
    report: ReplacementReport
    cursor: Optional[TextPosition] = None
    consumed: bool = False

    def apply(self, applier: Optional[PatchApplier] = None) -> ApplyResult:
        if self.consumed:
            raise RuntimeError("a replacement report can only be applied once")
        self.consumed = True

        applier = applier or PatchApplier()
        result = applier.apply(self.document, self.report.edits, self.report.cursor)
        self.cursor = result.cursor
        return result


def format_regions(
    document: Document,
    regions: Sequence[Region],
    by_line: bool,
    style: Optional[str] = None,
    assume_filename: Optional[str] = None,
    *,
    fallback_style: Optional[str] = None,
    config: Optional[Config] = None,
    runner: Optional[FormatterRunner] = None,
) -> FormatResult:
    """Format *regions* of *document* in place.

    Args:
        document: The document to format.
        regions: ``LineRange`` values when *by_line*, otherwise ``TextRange``.
        by_line: Whether the regions are line ranges.
        style: Value for ``-style`` (default: from config).
        assume_filename: Name the formatter uses to pick a language and
            style file (default: the document's path).
        fallback_style: Value for ``-fallback-style`` (default: from config).
        config: Settings; loaded from the usual locations when omitted.
        runner: Formatter runner; built from *config* when omitted.

    Raises:
        FormatError: Any failure.  Only ``PatchApplicationError`` leaves
            the document modified.
    """
    if not regions:
        raise ValueError("no regions to format")

    cfg = config or Config.load()
    runner = runner or FormatterRunner(cfg.FORMATTER_COMMAND, cfg.TIMEOUT)

    region_args = RegionRequestBuilder().build(regions, by_line, document)

    before = document.text
    cursor = document.position_map().to_byte_offset(document.cursor)
    args = runner.build_args(
        region_args,
        cursor=cursor,
        style=style or cfg.STYLE,
        fallback_style=fallback_style or cfg.FALLBACK_STYLE or None,
        assume_filename=assume_filename or document.path,
    )
    cwd = os.path.dirname(document.path) if document.path else None

    output = runner.run(args, before.encode(document.encoding), cwd=cwd)
    report = ReplacementReportParser().parse(output)

    if document.text != before:
        raise StalePosition("document changed while the formatter was running")

    session = PatchSession(document, report)
    applied = session.apply()

    if report.incomplete:
        _logger.warning(
            "[Format] Formatter reported syntax errors in %s; "
            "applied %d edit(s) from a partial parse",
            document.path or "<buffer>", applied.edits_applied,
        )
    _logger.info(
        "[Format] Applied %d edit(s) to %s",
        applied.edits_applied, document.path or "<buffer>",
    )

    return FormatResult(
        success=True,
        edits_applied=applied.edits_applied,
        cursor=session.cursor,
        incomplete=report.incomplete,
    )


def format_whole_document(
    document: Document,
    style: Optional[str] = None,
    assume_filename: Optional[str] = None,
    **kwargs,
) -> FormatResult:
    """Format the entire document."""
    whole = TextRange(TextPosition(0), TextPosition(len(document.text)))
    return format_regions(document, [whole], False, style, assume_filename,
                          **kwargs)


def format_changed_regions(
    document: Document,
    style: Optional[str] = None,
    assume_filename: Optional[str] = None,
    **kwargs,
) -> FormatResult:
    """Format only the lines that differ from the committed version.

    Returns a successful result without running the formatter when no
    line has changed.
    """
    if not document.path:
        raise ValueError("changed-region formatting needs a document with a path")

    cfg = kwargs.get("config") or Config.load()
    kwargs["config"] = cfg

    diff_text = git_utils.diff_against_head(
        document.path,
        document.text.encode(document.encoding),
        git=cfg.GIT_COMMAND,
    )
    regions = DiffRegionExtractor().extract(diff_text)
    if not regions:
        _logger.info("[Format] No changed lines in %s", document.path)
        return FormatResult(success=True, cursor=document.cursor,
                            formatter_ran=False)

    return format_regions(document, regions, True, style, assume_filename,
                          **kwargs)
