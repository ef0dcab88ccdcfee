"""Patch pipeline — coordinates, regions, replacement reports and edits."""

from .positions import ByteOffset, TextPosition, Exactness, PositionMap
from .document import Document, TextDocument
from .diff_regions import DiffRegionExtractor
from .region_request import (
    LineRange, TextRange, ByteRange, RegionRequestBuilder, selection_from_bytes,
)
from .report_parser import Edit, ReplacementReport, ReplacementReportParser
from .patch_applier import PatchApplier, ApplyResult
from .errors import (
    FormatError, SubprocessFailure, FormatterTimeout, MalformedReport,
    PositionError, OutOfRange, MisalignedOffset, StalePosition,
    PatchApplicationError,
)

__all__ = [
    "ByteOffset", "TextPosition", "Exactness", "PositionMap",
    "Document", "TextDocument",
    "DiffRegionExtractor",
    "LineRange", "TextRange", "ByteRange", "RegionRequestBuilder",
    "selection_from_bytes",
    "Edit", "ReplacementReport", "ReplacementReportParser",
    "PatchApplier", "ApplyResult",
    "FormatError", "SubprocessFailure", "FormatterTimeout", "MalformedReport",
    "PositionError", "OutOfRange", "MisalignedOffset", "StalePosition",
    "PatchApplicationError",
]
