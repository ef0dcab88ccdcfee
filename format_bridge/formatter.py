"""
Formatter runner — invokes the external formatter as a subprocess and
returns its replacement report.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Optional, Sequence, Union

from .editing.errors import FormatterTimeout, SubprocessFailure
from .editing.positions import ByteOffset

logger = logging.getLogger(__name__)


def decode_output(raw: bytes | None) -> str:
    """Decode subprocess diagnostics, trying UTF-8 first then the locale."""
    if not raw:
        return ""
    try:
        return raw.decode("utf-8")
    except (UnicodeDecodeError, ValueError):
        pass
    try:
        import locale
        return raw.decode(locale.getpreferredencoding(False), errors="replace")
    except (UnicodeDecodeError, ValueError, LookupError):
        return raw.decode("ascii", errors="replace")


class FormatterRunner:
    """Run ``clang-format``-compatible formatters in replacements mode."""

    def __init__(
        self,
        command: Union[str, Sequence[str]] = "clang-format",
        timeout: float = 0,
    ) -> None:
        if isinstance(command, str):
            command = shlex.split(command)
        if not command:
            raise ValueError("formatter command is empty")
        self.command = list(command)
        self.timeout = timeout

    def build_args(
        self,
        region_args: Sequence[str],
        *,
        cursor: ByteOffset,
        style: str = "file",
        fallback_style: Optional[str] = None,
        assume_filename: Optional[str] = None,
    ) -> list[str]:
        args = [*self.command, "-output-replacements-xml", f"-style={style}"]
        if fallback_style:
            args.append(f"-fallback-style={fallback_style}")
        if assume_filename:
            args.append(f"-assume-filename={assume_filename}")
        args.append(f"-cursor={cursor.value}")
        args.extend(region_args)
        return args

    def run(
        self,
        args: Sequence[str],
        content: bytes,
        cwd: Optional[str] = None,
    ) -> bytes:
        """Feed *content* to the formatter and return its stdout.

        Raises
        ------
        SubprocessFailure
            Non-zero exit, death by signal, or the executable is missing.
        FormatterTimeout
            The configured timeout expired; the process is killed.
        """
        logger.info("[Format] Running: %s", shlex.join(args))
        try:
            proc = subprocess.Popen(
                list(args),
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as exc:
            raise SubprocessFailure(
                f"could not start {args[0]!r}: {exc}"
            ) from exc

        with proc:
            try:
                stdout, stderr = proc.communicate(
                    content, timeout=self.timeout or None
                )
            except subprocess.TimeoutExpired as exc:
                proc.kill()
                proc.communicate()
                logger.warning(
                    "[Format] Formatter timed out after %ss", self.timeout
                )
                raise FormatterTimeout(
                    f"{args[0]} did not finish within {self.timeout} seconds",
                    timeout=self.timeout,
                ) from exc

        diagnostics = decode_output(stderr)
        if proc.returncode < 0:
            raise SubprocessFailure(
                f"{args[0]} killed by signal {-proc.returncode}",
                signal=-proc.returncode,
                stderr=diagnostics,
            )
        if proc.returncode != 0:
            raise SubprocessFailure(
                f"{args[0]} exited with status {proc.returncode}",
                returncode=proc.returncode,
                stderr=diagnostics,
            )

        if diagnostics.strip():
            logger.debug("[Format] Formatter stderr: %s", diagnostics.strip())
        logger.info("[Format] Formatter returned %d bytes", len(stdout))
        return stdout
