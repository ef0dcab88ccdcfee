"""Tests for the DiffRegionExtractor."""

from format_bridge.editing.diff_regions import DiffRegionExtractor
from format_bridge.editing.region_request import LineRange


GIT_DIFF = """\
diff --git a/committed b/current
index 3b18e51..a8c4f2b 100644
--- a/committed
+++ b/current
@@ -3 +3 @@ int main() {
-  return 0;
+  return  1;
@@ -10,0 +11,3 @@ void helper()
+int a;
+int b;
+int c;
@@ -20,2 +23,4 @@
-x
-y
+p
+q
+r
+s
"""


class TestExtract:
    def test_insertion_header(self):
        assert DiffRegionExtractor().extract("@@ -10,0 +11,3 @@\n") == [LineRange(11, 13)]

    def test_omitted_length_means_one_line(self):
        assert DiffRegionExtractor().extract("@@ -5,2 +5 @@\n") == [LineRange(5, 5)]

    def test_full_git_diff(self):
        ranges = DiffRegionExtractor().extract(GIT_DIFF)
        assert ranges == [LineRange(3, 3), LineRange(11, 13), LineRange(23, 26)]

    def test_pure_deletion_marks_following_line(self):
        assert DiffRegionExtractor().extract("@@ -7,2 +6,0 @@\n") == [LineRange(6, 6)]

    def test_deletion_at_top_of_file_marks_first_line(self):
        assert DiffRegionExtractor().extract("@@ -1,2 +0,0 @@\n") == [LineRange(1, 1)]

    def test_duplicates_collapse(self):
        diff = "@@ -1 +1 @@\n@@ -1 +1 @@\n@@ -4 +4,2 @@\n"
        assert DiffRegionExtractor().extract(diff) == [LineRange(1, 1), LineRange(4, 5)]

    def test_malformed_headers_skipped(self):
        diff = "@@ garbage @@\n@@ -1 +x,2 @@\n@@@ -1 -1 +1 @@@\n@@ -2 +2 @@\n"
        assert DiffRegionExtractor().extract(diff) == [LineRange(2, 2)]

    def test_empty_diff(self):
        assert DiffRegionExtractor().extract("") == []
