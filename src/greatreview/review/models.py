"""Review annotation models and progress counting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from greatreview.git.models import DiffFile


class ReviewDecision(str, Enum):
    APPROVED = "approved"
    COMMENTED = "commented"
    REJECTED = "rejected"


class RejectMode(str, Enum):
    PROPOSE_ALTERNATIVE = "propose_alternative"
    REQUEST_POSSIBILITIES = "request_possibilities"


@dataclass(frozen=True)
class LineSelection:
    """Inclusive range of line numbers within a hunk."""

    start: int
    end: int

    def __contains__(self, line_no: object) -> bool:
        return isinstance(line_no, int) and self.start <= line_no <= self.end

    def describe(self) -> str:
        if self.start == self.end:
            return f"line {self.start}"
        return f"lines {self.start}-{self.end}"


@dataclass(frozen=True)
class HunkAnnotation:
    decision: ReviewDecision
    comment: Optional[str] = None
    reject_mode: Optional[RejectMode] = None
    selected_text: Optional[str] = None
    selected_lines: Optional[LineSelection] = None


def hunk_key(file_path: str, hunk_index: int) -> str:
    """Stable key for a hunk: ``<path>::<index>``."""
    return f"{file_path}::{hunk_index}"


@dataclass(frozen=True)
class ReviewProgress:
    total: int
    reviewed: int
    approved: int
    commented: int
    rejected: int

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.reviewed >= self.total


def review_progress(files: List[DiffFile], annotations: Dict[str, HunkAnnotation]) -> ReviewProgress:
    """Count hunks and decisions; annotations for unknown hunks are ignored."""
    keys = {hunk_key(f.path, i) for f in files for i in range(len(f.hunks))}
    counts = {decision: 0 for decision in ReviewDecision}
    for key, annotation in annotations.items():
        if key in keys:
            counts[annotation.decision] += 1
    return ReviewProgress(
        total=len(keys),
        reviewed=sum(counts.values()),
        approved=counts[ReviewDecision.APPROVED],
        commented=counts[ReviewDecision.COMMENTED],
        rejected=counts[ReviewDecision.REJECTED],
    )
