"""great-review — structured, reviewable views of git diffs."""

__version__ = "0.1.0"
