import logging
import os
import sys
from datetime import datetime


def setup_logger(log_dir: str | None = None, verbose: bool = False) -> logging.Logger:
    """Configure the package logger.

    A file handler under *log_dir* captures everything; *verbose* adds a
    stderr handler.  Without either, log records are dropped.
    """
    logger = logging.getLogger("format_bridge")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    )

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"format_{timestamp}.log")

        # File handler — captures everything
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    if verbose:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.DEBUG)
        sh.setFormatter(formatter)
        logger.addHandler(sh)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


class CLIDisplay:
    """User-facing messages on stderr."""

    # ── Color palette ──
    C_GREEN  = "\033[38;5;114m"
    C_RED    = "\033[38;5;203m"
    C_YELLOW = "\033[38;5;221m"
    C_DIM    = "\033[38;5;243m"
    C_RESET  = "\033[0m"

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self.color = (
            hasattr(self.stream, "isatty") and self.stream.isatty()
            and "NO_COLOR" not in os.environ
        )

    def _paint(self, color: str, text: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{self.C_RESET}"

    def _emit(self, text: str):
        print(text, file=self.stream)

    def success(self, path: str, edits: int):
        noun = "edit" if edits == 1 else "edits"
        self._emit(self._paint(self.C_GREEN, f"✔  {path}: {edits} {noun} applied"))

    def incomplete(self, path: str):
        self._emit(self._paint(
            self.C_YELLOW,
            f"!  {path}: formatter found syntax errors, "
            f"result may be incomplete",
        ))

    def failure(self, path: str, error: Exception):
        self._emit(self._paint(self.C_RED, f"✘  {path}: {error}"))

    def nothing_to_do(self, path: str):
        self._emit(self._paint(self.C_DIM, f"–  {path}: no changed lines"))
