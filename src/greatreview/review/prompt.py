"""Turn hunk-level review annotations into a feedback prompt for the change author."""

from __future__ import annotations

from typing import Dict, List, Optional

from greatreview.git.models import DiffFile, DiffHunk, LineType
from greatreview.review.models import (
    HunkAnnotation,
    LineSelection,
    RejectMode,
    ReviewDecision,
    hunk_key,
)

_MARKERS = {
    LineType.ADDITION: "+",
    LineType.DELETION: "-",
    LineType.CONTEXT: " ",
}


def format_selected_text(text: str) -> str:
    return f"`{text}`"


def hunk_diff_text(hunk: DiffHunk, selected_lines: Optional[LineSelection] = None) -> str:
    """Re-prefix hunk lines with their diff markers.

    With *selected_lines*, keep only lines whose new line number (or old one,
    for deletions) falls inside the selection.
    """
    lines = hunk.lines
    if selected_lines is not None:
        lines = tuple(
            line for line in lines
            if (line.new_line_no if line.new_line_no is not None else line.old_line_no)
            in selected_lines
        )
    return "\n".join(f"{_MARKERS[line.line_type]}{line.content}" for line in lines)


def _section(path: str, hunk: DiffHunk, annotation: HunkAnnotation) -> str:
    heading = f"## {path} — Hunk {hunk.header}"
    text_part = (
        f" ({format_selected_text(annotation.selected_text)})" if annotation.selected_text else ""
    )
    comment = annotation.comment or ""

    if annotation.decision is ReviewDecision.COMMENTED:
        line_part = f" on {annotation.selected_lines.describe()}" if annotation.selected_lines else ""
        return f"{heading}\n**Comment**{line_part}{text_part}:\n{comment}"

    diff_block = "```diff\n" + hunk_diff_text(hunk, annotation.selected_lines) + "\n```"
    if annotation.reject_mode is RejectMode.PROPOSE_ALTERNATIVE:
        label = "propose alternative"
    else:
        label = "request other possibilities"
    return f"{heading}\n**Rejected** ({label}){text_part}:\n{diff_block}\n{comment}"


def generate_prompt(files: List[DiffFile], annotations: Dict[str, HunkAnnotation]) -> str:
    """Summarise a review: approved count plus one section per actionable hunk.

    Hunks without an annotation count as approved.
    """
    if not files:
        return ""

    approved = 0
    sections: List[str] = []
    for diff_file in files:
        for index, hunk in enumerate(diff_file.hunks):
            annotation = annotations.get(hunk_key(diff_file.path, index))
            if annotation is None or annotation.decision is ReviewDecision.APPROVED:
                approved += 1
                continue
            sections.append(_section(diff_file.path, hunk, annotation))

    if not sections:
        return f"I've reviewed your changes. All {approved} hunks approved as-is. Looks good!"

    return "\n".join([
        f"I've reviewed your changes. {approved} hunks approved as-is.",
        "",
        "The following need attention:",
        "",
        "\n\n".join(sections),
    ])
