"""
CLI entry point — argument parsing and main execution flow.
"""

import argparse
import sys

from .api import format_changed_regions, format_regions, format_whole_document
from .cli_display import CLIDisplay, setup_logger
from .config import Config
from .editing.document import TextDocument
from .editing.errors import FormatError, PatchApplicationError
from .editing.positions import ByteOffset, Exactness
from .editing.region_request import LineRange, selection_from_bytes


def _line_range(value: str) -> LineRange:
    try:
        start, end = value.split(":", 1)
        return LineRange(int(start), int(end))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"expected START:END with 1 <= START <= END, got {value!r}"
        ) from exc


def _non_negative(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formatbridge",
        description="Format a file (or parts of it) with an external "
                    "formatter and merge the edits back in place",
    )
    parser.add_argument("file", help="The file to format")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--lines", action="append", type=_line_range,
                       metavar="START:END",
                       help="Format this 1-based line range (repeatable)")
    scope.add_argument("--offset", action="append", type=_non_negative,
                       help="Start byte of a selection to format (repeatable, "
                            "pair with --length)")
    scope.add_argument("--changed", action="store_true",
                       help="Format only lines changed since HEAD")
    parser.add_argument("--length", action="append", type=_non_negative,
                        help="Byte length of the matching --offset selection")
    parser.add_argument("--style", default=None,
                        help="Formatting style (default: from config)")
    parser.add_argument("--fallback-style", default=None,
                        help="Style used when --style=file finds no config")
    parser.add_argument("--assume-filename", default=None,
                        help="File name the formatter should assume")
    parser.add_argument("--cursor", type=_non_negative, default=0,
                        help="Cursor byte offset to track through the edits")
    parser.add_argument("-i", "--in-place", action="store_true",
                        help="Rewrite the file instead of printing the result")
    parser.add_argument("--config", default=None,
                        help="Path to .formatbridge.yaml config file")
    parser.add_argument("--verbose", action="store_true",
                        help="Log progress to stderr")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    offsets = args.offset or []
    lengths = args.length or []
    if len(offsets) != len(lengths):
        parser.error("every --offset needs a matching --length")

    cfg = Config.load(args.config)
    log = setup_logger(cfg.LOG_DIR if cfg.LOG_TO_FILE else None, args.verbose)
    display = CLIDisplay()

    try:
        document = TextDocument.from_file(args.file, encoding=cfg.ENCODING)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        display.failure(args.file, exc)
        return 1

    options = dict(
        style=args.style,
        assume_filename=args.assume_filename,
        fallback_style=args.fallback_style,
        config=cfg,
    )

    try:
        document.move_cursor(document.position_map().to_text_position(
            ByteOffset(args.cursor), Exactness.APPROXIMATE))

        if args.changed:
            result = format_changed_regions(document, **options)
        elif args.lines:
            result = format_regions(document, args.lines, True, **options)
        elif offsets:
            selections = [selection_from_bytes(document, o, o + n)
                          for o, n in zip(offsets, lengths)]
            result = format_regions(document, selections, False, **options)
        else:
            result = format_whole_document(document, **options)
    except PatchApplicationError as exc:
        log.error(f"[Format] {args.file} left partially edited: {exc}")
        display.failure(args.file, exc)
        return 2
    except FormatError as exc:
        log.error(f"[Format] {args.file}: {exc}")
        display.failure(args.file, exc)
        return 1

    if result.incomplete:
        display.incomplete(args.file)

    if not result.formatter_ran:
        display.nothing_to_do(args.file)
    elif args.in_place:
        document.save()
        display.success(args.file, result.edits_applied)

    if not args.in_place:
        sys.stdout.write(document.text)

    cursor = document.position_map().to_byte_offset(document.cursor)
    log.info(f"[Format] Cursor now at byte {cursor.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
