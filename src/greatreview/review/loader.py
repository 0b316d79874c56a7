"""Load review annotations from a YAML (or JSON) file.

Expected shape, one entry per annotated hunk::

    - file: src/app.py
      hunk: 0
      decision: rejected
      reject_mode: propose_alternative
      comment: Use a context manager here.
      selected_lines: {start: 12, end: 14}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from greatreview.review.models import (
    HunkAnnotation,
    LineSelection,
    RejectMode,
    ReviewDecision,
    hunk_key,
)


class AnnotationError(Exception):
    """Raised when an annotation file is unreadable or an entry is invalid."""


def _parse_selection(raw: Any, where: str) -> LineSelection:
    if not isinstance(raw, dict) or not isinstance(raw.get("start"), int):
        raise AnnotationError(f"{where}: selected_lines needs integer 'start' and 'end'")
    end = raw.get("end", raw["start"])
    if not isinstance(end, int) or end < raw["start"]:
        raise AnnotationError(f"{where}: selected_lines 'end' must be >= 'start'")
    return LineSelection(start=raw["start"], end=end)


def parse_entry(entry: Any, index: int) -> tuple[str, HunkAnnotation]:
    """Validate one raw entry and return ``(hunk key, annotation)``."""
    where = f"entry {index}"
    if not isinstance(entry, dict):
        raise AnnotationError(f"{where}: expected a mapping")
    path = entry.get("file")
    hunk = entry.get("hunk")
    if not isinstance(path, str) or not path:
        raise AnnotationError(f"{where}: 'file' is required")
    if not isinstance(hunk, int) or hunk < 0:
        raise AnnotationError(f"{where}: 'hunk' must be a non-negative integer")

    try:
        decision = ReviewDecision(entry.get("decision"))
        reject_mode = RejectMode(entry["reject_mode"]) if entry.get("reject_mode") else None
    except ValueError as exc:
        raise AnnotationError(f"{where}: {exc}") from exc

    selected = entry.get("selected_lines")
    annotation = HunkAnnotation(
        decision=decision,
        comment=entry.get("comment"),
        reject_mode=reject_mode,
        selected_text=entry.get("selected_text"),
        selected_lines=_parse_selection(selected, where) if selected is not None else None,
    )
    return hunk_key(path, hunk), annotation


def load_annotations(path: Path) -> Dict[str, HunkAnnotation]:
    """Read *path* and return annotations keyed by hunk key; later entries win."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise AnnotationError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise AnnotationError(f"Failed to parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, list):
        data = [data]
    return dict(parse_entry(entry, i) for i, entry in enumerate(data))
