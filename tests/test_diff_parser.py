"""Tests for the unified diff parser — structure, numbering, leniency."""

from greatreview.git.diff_parser import (
    DiffParser,
    parse_hunk_header,
    parse_range,
    parse_unified_diff,
    path_from_boundary,
    split_lines,
)
from greatreview.git.models import DiffFile, FileStatus, LineType


def _assert_numbering(diff_file: DiffFile) -> None:
    """Old/new numbers form unbroken progressions from each hunk's start."""
    for hunk in diff_file.hunks:
        old_nos = [l.old_line_no for l in hunk.lines if l.line_type is not LineType.ADDITION]
        new_nos = [l.new_line_no for l in hunk.lines if l.line_type is not LineType.DELETION]
        assert old_nos == list(range(hunk.old_start, hunk.old_start + len(old_nos)))
        assert new_nos == list(range(hunk.new_start, hunk.new_start + len(new_nos)))


class TestBasicParsing:
    def test_empty_input(self):
        assert parse_unified_diff("") == []

    def test_text_without_boundary_marker(self):
        assert parse_unified_diff("just some text\n@@ -1 +1 @@\n+x\n") == []

    def test_new_file(self, sample_diff_new_file):
        files = DiffParser(sample_diff_new_file).parse()
        assert len(files) == 1
        f = files[0]
        assert f.path == "hello.txt"
        assert f.status == FileStatus.ADDED
        assert f.old_path is None
        assert len(f.hunks) == 1
        lines = f.hunks[0].lines
        assert [l.line_type for l in lines] == [LineType.ADDITION] * 3
        assert [l.new_line_no for l in lines] == [1, 2, 3]
        assert all(l.old_line_no is None for l in lines)
        assert [l.content for l in lines] == ["line one", "line two", "line three"]

    def test_deleted_file(self, sample_diff_deleted_file):
        files = parse_unified_diff(sample_diff_deleted_file)
        assert files[0].status == FileStatus.DELETED
        lines = files[0].hunks[0].lines
        assert [l.line_type for l in lines] == [LineType.DELETION] * 3
        assert [l.old_line_no for l in lines] == [1, 2, 3]
        assert all(l.new_line_no is None for l in lines)

    def test_modified_file_numbering(self, sample_diff_modified):
        f = parse_unified_diff(sample_diff_modified)[0]
        assert f.status == FileStatus.MODIFIED
        hunk = f.hunks[0]
        assert hunk.header == "@@ -10,4 +10,5 @@ def main():"
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (10, 4, 10, 5)

        numbered = [(l.line_type, l.old_line_no, l.new_line_no, l.content) for l in hunk.lines]
        assert numbered == [
            (LineType.CONTEXT, 10, 10, "    setup()"),
            (LineType.DELETION, 11, None, "    run(debug=True)"),
            (LineType.ADDITION, None, 11, "    run(debug=False)"),
            (LineType.ADDITION, None, 12, "    report()"),
            (LineType.CONTEXT, 12, 13, "    teardown()"),
            (LineType.CONTEXT, 13, 14, "    return 0"),
        ]
        _assert_numbering(f)

    def test_file_headers_not_content(self, sample_diff_modified):
        hunk = parse_unified_diff(sample_diff_modified)[0].hunks[0]
        assert not any(l.content.startswith(("--", "++")) for l in hunk.lines)

    def test_marker_only_stripped_once(self):
        diff = (
            "diff --git a/f b/f\n"
            "@@ -1 +1 @@\n"
            "--- not a header\n"
            "+++ not a header either\n"
        )
        lines = parse_unified_diff(diff)[0].hunks[0].lines
        assert [(l.line_type, l.content) for l in lines] == [
            (LineType.DELETION, "-- not a header"),
            (LineType.ADDITION, "++ not a header either"),
        ]


class TestMultipleFilesAndHunks:
    def test_two_files_in_order(self, sample_diff_two_files):
        files = parse_unified_diff(sample_diff_two_files)
        assert [f.path for f in files] == ["a.py", "b.py"]

    def test_counters_reset_per_file(self, sample_diff_two_files):
        a, b = parse_unified_diff(sample_diff_two_files)
        assert a.hunks[0].lines[0].old_line_no == 3
        assert a.hunks[0].lines[0].new_line_no == 3
        assert b.hunks[0].lines[0].old_line_no == 40
        assert b.hunks[0].lines[0].new_line_no == 41
        assert [l.new_line_no for l in b.hunks[0].lines] == [41, 42, 43]
        _assert_numbering(a)
        _assert_numbering(b)

    def test_two_hunks_anchor_independently(self, sample_diff_two_hunks):
        f = parse_unified_diff(sample_diff_two_hunks)[0]
        assert len(f.hunks) == 2
        first, second = f.hunks
        assert first.old_start == 1
        assert second.old_start == 20
        assert [l.new_line_no for l in first.lines] == [1, 2, 3, 4]
        assert [l.old_line_no for l in second.lines] == [20, 21, 22]
        assert [l.new_line_no for l in second.lines] == [21, None, 22]
        assert second.header == "@@ -20,3 +21,2 @@ def f():"
        _assert_numbering(f)

    def test_file_count_matches_boundary_markers(
        self, sample_diff_new_file, sample_diff_rename, sample_diff_binary, sample_diff_two_hunks
    ):
        text = sample_diff_new_file + sample_diff_rename + sample_diff_binary + sample_diff_two_hunks
        files = parse_unified_diff(text)
        assert [f.path for f in files] == ["hello.txt", "new_name.py", "image.png", "f.py"]

    def test_file_without_hunks_between_others(self, sample_diff_mode_only, sample_diff_new_file):
        files = parse_unified_diff(sample_diff_mode_only + sample_diff_new_file)
        assert files[0].path == "script.sh"
        assert files[0].status == FileStatus.MODIFIED
        assert files[0].hunks == ()
        assert files[1].hunks[0].lines[0].new_line_no == 1


class TestMetadata:
    def test_pure_rename(self, sample_diff_rename):
        files = parse_unified_diff(sample_diff_rename)
        assert len(files) == 1
        f = files[0]
        assert f.status == FileStatus.RENAMED
        assert f.old_path == "old_name.py"
        assert f.path == "new_name.py"
        assert f.hunks == ()

    def test_rename_with_edit(self, sample_diff_rename_with_edit):
        f = parse_unified_diff(sample_diff_rename_with_edit)[0]
        assert f.status == FileStatus.RENAMED
        assert (f.old_path, f.path) == ("src/old.py", "src/new.py")
        assert len(f.hunks[0].lines) == 3

    def test_binary_file_has_no_hunks(self, sample_diff_binary):
        f = parse_unified_diff(sample_diff_binary)[0]
        assert f.path == "image.png"
        assert f.status == FileStatus.ADDED
        assert f.hunks == ()

    def test_binary_marker_ignores_following_hunk(self):
        diff = (
            "diff --git a/blob.bin b/blob.bin\n"
            "Binary files a/blob.bin and b/blob.bin differ\n"
            "@@ -1 +1 @@\n"
            "+not really\n"
            "diff --git a/next.txt b/next.txt\n"
            "@@ -1 +1 @@\n"
            "+ok\n"
        )
        blob, nxt = parse_unified_diff(diff)
        assert blob.hunks == ()
        assert nxt.path == "next.txt"
        assert nxt.hunks[0].lines[0].content == "ok"

    def test_mode_only_change(self, sample_diff_mode_only):
        f = parse_unified_diff(sample_diff_mode_only)[0]
        assert f.status == FileStatus.MODIFIED
        assert f.hunks == ()

    def test_rename_then_new_file_keeps_invariant(self):
        diff = (
            "diff --git a/x b/y\n"
            "rename from x\n"
            "rename to y\n"
            "new file mode 100644\n"
        )
        f = parse_unified_diff(diff)[0]
        assert f.status == FileStatus.ADDED
        assert f.old_path is None
        assert f.path == "y"

    def test_rename_to_without_rename_from(self):
        f = parse_unified_diff("diff --git a/x b/x\nrename to z\n")[0]
        assert f.path == "z"
        assert f.status == FileStatus.MODIFIED
        assert f.old_path is None


class TestEdgeCases:
    def test_no_newline_marker_skipped(self, sample_diff_no_newline):
        f = parse_unified_diff(sample_diff_no_newline)[0]
        lines = f.hunks[0].lines
        assert all("No newline" not in l.content for l in lines)
        assert [(l.line_type, l.old_line_no, l.new_line_no) for l in lines] == [
            (LineType.CONTEXT, 1, 1),
            (LineType.DELETION, 2, None),
            (LineType.ADDITION, None, 2),
            (LineType.ADDITION, None, 3),
        ]

    def test_no_newline_marker_at_end_of_input(self):
        diff = (
            "diff --git a/f b/f\n"
            "@@ -0,0 +1 @@\n"
            "+only\n"
            "\\ No newline at end of file"
        )
        lines = parse_unified_diff(diff)[0].hunks[0].lines
        assert len(lines) == 1
        assert lines[0].content == "only"

    def test_single_line_hunk_header_defaults_count(self):
        hunk = parse_unified_diff("diff --git a/f.txt b/f.txt\n@@ -7 +8 @@\n-a\n+b\n")[0].hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (7, 1, 8, 1)
        assert hunk.lines[0].old_line_no == 7
        assert hunk.lines[1].new_line_no == 8

    def test_malformed_numbers_default_to_zero(self):
        hunk = parse_unified_diff("diff --git a/f b/f\n@@ -x,y +3,z @@\n+a\n")[0].hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (0, 0, 3, 0)
        assert hunk.lines[0].new_line_no == 3

    def test_unshaped_hunk_header_is_ignored(self):
        diff = "diff --git a/f b/f\n@@ garbage\n+a\n@@ -1 +1 @@\n+b\n"
        f = parse_unified_diff(diff)[0]
        assert len(f.hunks) == 1
        assert f.hunks[0].lines[0].content == "b"

    def test_unknown_body_lines_skipped(self):
        diff = "diff --git a/f b/f\n@@ -1,2 +1,2 @@\n a\n\n?? noise\n b\n"
        lines = parse_unified_diff(diff)[0].hunks[0].lines
        assert [l.content for l in lines] == ["a", "b"]
        assert [l.new_line_no for l in lines] == [1, 2]

    def test_crlf_line_endings(self):
        diff = "diff --git a/w.txt b/w.txt\r\n@@ -1 +1 @@\r\n-old\r\n+new\r\n"
        f = parse_unified_diff(diff)[0]
        assert f.path == "w.txt"
        assert [l.content for l in f.hunks[0].lines] == ["old", "new"]

    def test_form_feed_does_not_split(self):
        diff = "diff --git a/f b/f\n@@ -0,0 +1 @@\n+page\x0cbreak\n"
        lines = parse_unified_diff(diff)[0].hunks[0].lines
        assert len(lines) == 1
        assert lines[0].content == "page\x0cbreak"

    def test_path_with_b_separator_is_split_at_last_occurrence(self):
        f = parse_unified_diff("diff --git a/dir b/x b/dir b/x\n")[0]
        assert f.path == "x"

    def test_boundary_without_b_path(self):
        f = parse_unified_diff("diff --git weird\n")[0]
        assert f.path == ""

    def test_parse_is_repeatable(self, sample_diff_two_files):
        parser = DiffParser(sample_diff_two_files)
        first = parser.parse()
        second = parser.parse()
        assert first == second
        assert first is not second
        assert first[0] is not second[0]


class TestHelpers:
    def test_split_lines(self):
        assert split_lines("") == []
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\r\nb") == ["a", "b"]
        assert split_lines("a\n\nb\n") == ["a", "", "b"]

    def test_parse_range(self):
        assert parse_range("5") == (5, 1)
        assert parse_range("5,0") == (5, 0)
        assert parse_range("5,") == (5, 0)
        assert parse_range("") == (0, 1)
        assert parse_range("+5,2") == (0, 2)
        assert parse_range("\u0665") == (0, 1)

    def test_parse_hunk_header(self):
        assert parse_hunk_header("@@ -1,2 +3,4 @@ ctx") == (1, 2, 3, 4)
        assert parse_hunk_header("@@ -1 +1 @@") == (1, 1, 1, 1)
        assert parse_hunk_header("@@ -1 +1") is None
        assert parse_hunk_header("@@ 1 2 @@") is None
        assert parse_hunk_header("not a header") is None

    def test_path_from_boundary(self):
        assert path_from_boundary("diff --git a/src/x.py b/src/x.py") == "src/x.py"
        assert path_from_boundary("diff --git a/x b/y") == "y"
