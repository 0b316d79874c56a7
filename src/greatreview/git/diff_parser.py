"""Unified diff parser — raw ``git diff`` text to DiffFile / DiffHunk / DiffLine.

The parser is lenient by contract: it never raises. Unknown metadata lines
are ignored, malformed numeric fields in hunk headers decode to 0, and body
lines of unexpected shape are dropped. Renames, binary markers, missing
``\\ No newline at end of file`` markers and diffs against an empty tree are
all handled.

Paths come from the text after the last `` b/`` on the ``diff --git`` line,
so a file whose name itself contains `` b/`` is misattributed unless a
``rename to`` line corrects it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from greatreview.git.models import DiffFile, DiffHunk, DiffLine, FileStatus

_FILE_BOUNDARY = "diff --git "
_PATH_SEPARATOR = " b/"
_HUNK_PREFIX = "@@ "
_NO_NEWLINE = "\\ No newline at end of file"

_NEW_FILE = "new file mode"
_DELETED_FILE = "deleted file mode"
_RENAME_FROM = "rename from "
_RENAME_TO = "rename to "
_BINARY = "Binary files"

_ASCII_DIGITS_RE = re.compile(r"[0-9]+")


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Form feeds and other characters that ``str.splitlines`` treats as
    boundaries can legitimately appear inside diffed content.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _to_int(field_text: str) -> int:
    """Decode a header number; anything that is not plain digits becomes 0."""
    if _ASCII_DIGITS_RE.fullmatch(field_text):
        return int(field_text)
    return 0


def parse_range(range_text: str) -> Tuple[int, int]:
    """Decode ``start`` or ``start,count``. A missing count means 1."""
    if "," in range_text:
        start, count = range_text.split(",", 1)
        return _to_int(start), _to_int(count)
    return _to_int(range_text), 1


def parse_hunk_header(line: str) -> Optional[Tuple[int, int, int, int]]:
    """Return ``(old_start, old_count, new_start, new_count)`` or None.

    None means the line does not have the ``@@ -a +b @@`` shape at all; bad
    numbers inside a well-shaped header still decode (to 0).
    """
    if not line.startswith(_HUNK_PREFIX):
        return None
    rest = line[len(_HUNK_PREFIX):]
    end = rest.find(" @@")
    if end < 0:
        return None
    parts = rest[:end].split()
    if len(parts) < 2 or not parts[0].startswith("-") or not parts[1].startswith("+"):
        return None
    old_start, old_count = parse_range(parts[0][1:])
    new_start, new_count = parse_range(parts[1][1:])
    return old_start, old_count, new_start, new_count


def path_from_boundary(line: str) -> str:
    """Current path from a ``diff --git a/<old> b/<new>`` line ("" if absent)."""
    pos = line.rfind(_PATH_SEPARATOR)
    if pos < 0:
        return ""
    return line[pos + len(_PATH_SEPARATOR):]


class _LineCursor:
    """Pull-based cursor: look at the current line, consume it when handled."""

    def __init__(self, lines: List[str]) -> None:
        self._lines = lines
        self._pos = 0

    def peek(self) -> Optional[str]:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def advance(self) -> None:
        self._pos += 1


class _State(Enum):
    SCANNING_FOR_FILE = auto()
    IN_FILE_METADATA = auto()
    IN_HUNK_BODY = auto()


@dataclass
class _HunkBuilder:
    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[DiffLine] = field(default_factory=list)
    old_line: int = 0
    new_line: int = 0

    def __post_init__(self) -> None:
        self.old_line = self.old_start
        self.new_line = self.new_start

    def add_body_line(self, line: str) -> None:
        if line == _NO_NEWLINE:
            return
        if line.startswith("+"):
            self.lines.append(DiffLine.addition(line[1:], self.new_line))
            self.new_line += 1
        elif line.startswith("-"):
            self.lines.append(DiffLine.deletion(line[1:], self.old_line))
            self.old_line += 1
        elif line.startswith(" "):
            self.lines.append(DiffLine.context(line[1:], self.old_line, self.new_line))
            self.old_line += 1
            self.new_line += 1
        # Any other shape is not a hunk line; drop it.

    def build(self) -> DiffHunk:
        return DiffHunk(
            header=self.header,
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            lines=tuple(self.lines),
        )


@dataclass
class _FileBuilder:
    path: str
    old_path: Optional[str] = None
    status: FileStatus = FileStatus.MODIFIED
    hunks: List[_HunkBuilder] = field(default_factory=list)
    binary: bool = False

    def apply_metadata(self, line: str) -> None:
        if line.startswith(_NEW_FILE):
            self.status = FileStatus.ADDED
        elif line.startswith(_DELETED_FILE):
            self.status = FileStatus.DELETED
        elif line.startswith(_RENAME_FROM):
            self.old_path = line[len(_RENAME_FROM):]
            self.status = FileStatus.RENAMED
        elif line.startswith(_RENAME_TO):
            self.path = line[len(_RENAME_TO):]
        elif line.startswith(_BINARY):
            self.binary = True
            self.hunks.clear()
        # "--- ", "+++ ", index, similarity, mode lines: nothing to record

    def build(self) -> DiffFile:
        renamed = self.status is FileStatus.RENAMED
        return DiffFile(
            path=self.path,
            old_path=self.old_path if renamed else None,
            status=self.status,
            hunks=tuple(h.build() for h in self.hunks),
        )


class DiffParser:
    """Parse unified diff text into an ordered list of DiffFile objects.

    Usage::

        files = DiffParser(diff_text).parse()

    Each ``parse()`` call starts from scratch and returns new objects; the
    parser holds no state between calls.
    """

    def __init__(self, diff_text: str) -> None:
        self._text = diff_text

    def parse(self) -> List[DiffFile]:
        cursor = _LineCursor(split_lines(self._text))
        files: List[DiffFile] = []
        state = _State.SCANNING_FOR_FILE
        current: Optional[_FileBuilder] = None
        hunk: Optional[_HunkBuilder] = None

        while (line := cursor.peek()) is not None:
            if state is _State.SCANNING_FOR_FILE:
                if line.startswith(_FILE_BOUNDARY):
                    current = _FileBuilder(path=path_from_boundary(line))
                    state = _State.IN_FILE_METADATA
                cursor.advance()

            elif state is _State.IN_FILE_METADATA:
                assert current is not None
                if line.startswith(_FILE_BOUNDARY):
                    files.append(current.build())
                    current = None
                    state = _State.SCANNING_FOR_FILE
                    continue  # re-examine as the next file's boundary
                cursor.advance()
                if current.binary:
                    continue
                decoded = parse_hunk_header(line) if line.startswith(_HUNK_PREFIX) else None
                if decoded is not None:
                    hunk = _HunkBuilder(line, *decoded)
                    current.hunks.append(hunk)
                    state = _State.IN_HUNK_BODY
                else:
                    current.apply_metadata(line)

            else:  # IN_HUNK_BODY
                assert hunk is not None
                if line.startswith(_FILE_BOUNDARY) or line.startswith(_HUNK_PREFIX):
                    hunk = None
                    state = _State.IN_FILE_METADATA
                    continue  # re-examine in metadata state
                hunk.add_body_line(line)
                cursor.advance()

        if current is not None:
            files.append(current.build())
        return files


def parse_unified_diff(diff_text: str) -> List[DiffFile]:
    """Functional form of ``DiffParser(diff_text).parse()``."""
    return DiffParser(diff_text).parse()
