"""
Git integration — produces the zero-context diff between the committed
version of a file and the text currently in the editor.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import Optional, Sequence

from .editing.errors import SubprocessFailure
from .formatter import decode_output

logger = logging.getLogger(__name__)

# git diff --no-index exits 1 when the inputs differ
_DIFF_OK_STATUSES = (0, 1)


def _run_git(
    args: Sequence[str],
    cwd: Optional[str] = None,
    git: str = "git",
) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process (bytes output)."""
    try:
        return subprocess.run(
            [git, *args],
            cwd=cwd,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise SubprocessFailure(f"could not start {git!r}: {exc}") from exc


def is_git_repo(directory: str, git: str = "git") -> bool:
    """Return ``True`` if *directory* is inside a git work tree."""
    proc = _run_git(["rev-parse", "--is-inside-work-tree"], cwd=directory, git=git)
    return proc.returncode == 0


def committed_text(path: str, git: str = "git") -> Optional[bytes]:
    """Return the ``HEAD`` version of *path*, or ``None`` if it has none."""
    directory, name = os.path.split(os.path.abspath(path))
    if not is_git_repo(directory, git=git):
        logger.info("[Git] %s is not inside a git work tree", directory)
        return None
    proc = _run_git(["show", f"HEAD:./{name}"], cwd=directory, git=git)
    if proc.returncode != 0:
        logger.debug(
            "[Git] No committed version of %s: %s",
            path, decode_output(proc.stderr).strip(),
        )
        return None
    return proc.stdout.replace(b"\r\n", b"\n")


def diff_against_head(path: str, current: bytes, git: str = "git") -> str:
    """Return a ``-U0`` diff from the committed *path* to *current*.

    A file without a committed version is diffed against empty content,
    so every line of *current* shows up as added.
    """
    original = committed_text(path, git=git)
    if original is None:
        original = b""

    with tempfile.TemporaryDirectory(prefix="formatbridge_") as tmp_dir:
        old_path = os.path.join(tmp_dir, "committed")
        new_path = os.path.join(tmp_dir, "current")
        with open(old_path, "wb") as f:
            f.write(original)
        with open(new_path, "wb") as f:
            f.write(current)

        proc = _run_git(
            ["diff", "--no-index", "--no-color", "--no-ext-diff", "-U0",
             old_path, new_path],
            cwd=tmp_dir,
            git=git,
        )

    if proc.returncode not in _DIFF_OK_STATUSES:
        raise SubprocessFailure(
            f"git diff exited with status {proc.returncode}",
            returncode=proc.returncode,
            stderr=decode_output(proc.stderr),
        )

    diff_text = decode_output(proc.stdout)
    logger.debug("[Git] Diff for %s: %d bytes", path, len(diff_text))
    return diff_text
