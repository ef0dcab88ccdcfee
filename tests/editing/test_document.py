"""Tests for the in-memory TextDocument."""

import pytest

from format_bridge.editing.document import Document, TextDocument
from format_bridge.editing.errors import OutOfRange
from format_bridge.editing.positions import TextPosition


class TestTextDocument:
    def test_satisfies_protocol(self):
        assert isinstance(TextDocument("x"), Document)

    def test_newlines_normalized(self):
        doc = TextDocument("a\r\nb\rc\n")
        assert doc.text == "a\nb\nc\n"

    @pytest.mark.parametrize("text, newline", [
        ("a\nb\n", "\n"),
        ("a\r\nb\r\nc\n", "\r\n"),
        ("a\rb\r", "\r"),
        ("no line break", "\n"),
    ])
    def test_dominant_newline_remembered(self, text, newline):
        assert TextDocument(text).newline == newline

    def test_byte_order_mark_codec_rejected(self):
        with pytest.raises(ValueError):
            TextDocument("x", encoding="utf-16")

    def test_delete_and_insert(self):
        doc = TextDocument("int x=1;")
        doc.delete(TextPosition(5), TextPosition(6))
        doc.insert(TextPosition(5), " = ")
        assert doc.text == "int x = 1;"

    def test_cursor_after_edit_shifts(self):
        doc = TextDocument("abcdef", cursor=5)
        doc.delete(TextPosition(1), TextPosition(3))
        assert doc.cursor == TextPosition(3)
        doc.insert(TextPosition(0), "xyz")
        assert doc.cursor == TextPosition(6)

    def test_cursor_inside_deleted_span_collapses(self):
        doc = TextDocument("abcdef", cursor=3)
        doc.delete(TextPosition(1), TextPosition(5))
        assert doc.cursor == TextPosition(1)

    def test_cursor_before_edit_stays(self):
        doc = TextDocument("abcdef", cursor=1)
        doc.delete(TextPosition(2), TextPosition(4))
        doc.insert(TextPosition(1), "zz")
        assert doc.cursor == TextPosition(1)

    def test_out_of_range_positions(self):
        doc = TextDocument("abc")
        with pytest.raises(OutOfRange):
            doc.delete(TextPosition(1), TextPosition(9))
        with pytest.raises(OutOfRange):
            doc.move_cursor(TextPosition(4))
        assert doc.text == "abc"

    def test_position_map_follows_edits(self):
        doc = TextDocument("中")
        assert doc.position_map().byte_length == 3
        doc.insert(TextPosition(1), "é")
        assert doc.position_map().byte_length == 5

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "main.cc"
        path.write_bytes("int main() {}\r\n// é\r\n".encode("utf-8"))

        doc = TextDocument.from_file(str(path))
        assert doc.text == "int main() {}\n// é\n"
        assert doc.path == str(path)

        doc.insert(TextPosition(0), "// header\n")
        doc.save()
        assert path.read_bytes() == "// header\r\nint main() {}\r\n// é\r\n".encode("utf-8")

    def test_lf_file_saved_as_lf(self, tmp_path):
        path = tmp_path / "main.cc"
        path.write_bytes(b"int x;\nint y;\n")

        doc = TextDocument.from_file(str(path))
        doc.insert(TextPosition(6), " // x")
        doc.save()
        assert path.read_bytes() == b"int x; // x\nint y;\n"

    def test_save_without_path(self):
        with pytest.raises(ValueError):
            TextDocument("x").save()
