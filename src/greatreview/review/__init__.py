"""Hunk review annotations and the feedback prompt built from them."""

from greatreview.review.loader import AnnotationError, load_annotations
from greatreview.review.models import (
    HunkAnnotation,
    LineSelection,
    RejectMode,
    ReviewDecision,
    ReviewProgress,
    hunk_key,
    review_progress,
)
from greatreview.review.prompt import generate_prompt, hunk_diff_text

__all__ = [
    "AnnotationError",
    "HunkAnnotation",
    "LineSelection",
    "RejectMode",
    "ReviewDecision",
    "ReviewProgress",
    "generate_prompt",
    "hunk_diff_text",
    "hunk_key",
    "load_annotations",
    "review_progress",
]
