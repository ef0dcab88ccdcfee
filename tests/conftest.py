"""Shared fixtures: a stand-in formatter executable driven by env vars."""

import os
import sys
import textwrap

import pytest

from format_bridge.config import Config


FAKE_FORMATTER = textwrap.dedent("""\
    import os
    import sys
    import time

    data = sys.stdin.buffer.read()
    with open(os.environ["FAKE_ARGS_FILE"], "w", encoding="utf-8") as f:
        f.write("\\n".join(sys.argv[1:]))
    with open(os.environ["FAKE_ARGS_FILE"] + ".stdin", "wb") as f:
        f.write(data)

    time.sleep(float(os.environ.get("FAKE_SLEEP", "0")))
    sys.stderr.write(os.environ.get("FAKE_STDERR", ""))
    sys.stdout.buffer.write(os.environ.get("FAKE_REPORT", "").encode("utf-8"))
    sys.exit(int(os.environ.get("FAKE_EXIT", "0")))
""")


class FakeFormatter:
    def __init__(self, tmp_path, monkeypatch):
        self.script = tmp_path / "fake_formatter.py"
        self.script.write_text(FAKE_FORMATTER, encoding="utf-8")
        self.args_file = tmp_path / "fake_args.txt"
        self._monkeypatch = monkeypatch
        monkeypatch.setenv("FAKE_ARGS_FILE", str(self.args_file))

    @property
    def command(self) -> list[str]:
        return [sys.executable, str(self.script)]

    def respond(self, report: str = "", exit_code: int = 0,
                stderr: str = "", sleep: float = 0) -> None:
        self._monkeypatch.setenv("FAKE_REPORT", report)
        self._monkeypatch.setenv("FAKE_EXIT", str(exit_code))
        self._monkeypatch.setenv("FAKE_STDERR", stderr)
        self._monkeypatch.setenv("FAKE_SLEEP", str(sleep))

    @property
    def args(self) -> list[str]:
        return self.args_file.read_text(encoding="utf-8").split("\n")

    @property
    def stdin(self) -> bytes:
        return (self.args_file.parent / (self.args_file.name + ".stdin")).read_bytes()

    def config(self, **overrides) -> Config:
        cfg = Config({})
        cfg.FORMATTER_COMMAND = self.command
        for key, value in overrides.items():
            setattr(cfg, key, value)
        return cfg


def replacements_xml(*replacements, cursor=None, incomplete=False) -> str:
    """Build a report the way clang-format prints one."""
    lines = [
        "<?xml version='1.0'?>",
        "<replacements xml:space='preserve' incomplete_format='%s'>"
        % ("true" if incomplete else "false"),
    ]
    if cursor is not None:
        lines.append(f"<cursor>{cursor}</cursor>")
    for offset, length, text in replacements:
        lines.append(
            f"<replacement offset='{offset}' length='{length}'>{text}</replacement>"
        )
    lines.append("</replacements>")
    return "\n".join(lines) + "\n"


@pytest.fixture
def fake_formatter(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("FORMATBRIDGE_"):
            monkeypatch.delenv(key)
    formatter = FakeFormatter(tmp_path, monkeypatch)
    formatter.respond()
    return formatter


@pytest.fixture
def report_xml():
    return replacements_xml
