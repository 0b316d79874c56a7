"""Data models for parsed diffs and repository metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class LineType(str, Enum):
    ADDITION = "Addition"
    DELETION = "Deletion"
    CONTEXT = "Context"


class FileStatus(str, Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single physical line inside a hunk, marker stripped."""

    content: str
    line_type: LineType
    old_line_no: Optional[int] = None
    new_line_no: Optional[int] = None

    def __post_init__(self) -> None:
        has_old = self.old_line_no is not None
        has_new = self.new_line_no is not None
        expected = {
            LineType.ADDITION: (False, True),
            LineType.DELETION: (True, False),
            LineType.CONTEXT: (True, True),
        }[self.line_type]
        if (has_old, has_new) != expected:
            raise ValueError(
                f"{self.line_type.value} line has old_line_no={self.old_line_no}, "
                f"new_line_no={self.new_line_no}"
            )

    @classmethod
    def addition(cls, content: str, new_line_no: int) -> "DiffLine":
        return cls(content, LineType.ADDITION, None, new_line_no)

    @classmethod
    def deletion(cls, content: str, old_line_no: int) -> "DiffLine":
        return cls(content, LineType.DELETION, old_line_no, None)

    @classmethod
    def context(cls, content: str, old_line_no: int, new_line_no: int) -> "DiffLine":
        return cls(content, LineType.CONTEXT, old_line_no, new_line_no)


@dataclass(frozen=True)
class DiffHunk:
    """One contiguous changed region and the header it was decoded from."""

    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = ()

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.line_type is LineType.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.line_type is LineType.DELETION)


@dataclass(frozen=True)
class DiffFile:
    """One changed path. ``old_path`` is set only on renames."""

    path: str
    old_path: Optional[str] = None
    status: FileStatus = FileStatus.MODIFIED
    hunks: Tuple[DiffHunk, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if (self.old_path is not None) != (self.status is FileStatus.RENAMED):
            raise ValueError(
                f"old_path must be set exactly when status is Renamed "
                f"(status={self.status.value}, old_path={self.old_path!r})"
            )

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)

    @property
    def has_hunks(self) -> bool:
        return bool(self.hunks)


@dataclass(frozen=True)
class RepoInfo:
    """Repository root, display name and current branch."""

    name: str
    branch: str
    path: str
