"""
Error taxonomy for a formatting invocation.

Everything raised by the pipeline derives from :class:`FormatError`, so
callers that only care about success/failure can catch a single type.
"""

from __future__ import annotations

from typing import Optional


class FormatError(Exception):
    """Base class for every failure of a formatting invocation."""

    kind = "format error"

    def __str__(self) -> str:
        return f"{self.kind}: {super().__str__()}"


class SubprocessFailure(FormatError):
    """The formatter (or git) exited non-zero or was killed by a signal."""

    kind = "formatter failed"

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        signal: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.signal = signal
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr.strip():
            text = f"{text}\n{self.stderr.rstrip()}"
        return text


class FormatterTimeout(FormatError):
    """The formatter ran longer than the configured timeout."""

    kind = "formatter timed out"

    def __init__(self, message: str, *, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class MalformedReport(FormatError):
    """The replacement report does not have the expected shape."""

    kind = "malformed replacement report"


class PositionError(FormatError):
    """A coordinate could not be translated against the current text."""

    kind = "position error"


class OutOfRange(PositionError):
    """An offset or position lies outside the document's bounds."""

    kind = "offset out of range"


class MisalignedOffset(OutOfRange):
    """A byte offset falls inside a multi-byte character."""

    kind = "offset not on a character boundary"


class StalePosition(PositionError):
    """A caller-supplied position no longer exists in the document."""

    kind = "stale position"


class PatchApplicationError(FormatError):
    """Applying edits stopped part-way; the document is partially modified."""

    kind = "patch application aborted"

    def __init__(self, message: str, *, edits_applied: int) -> None:
        super().__init__(message)
        self.edits_applied = edits_applied
