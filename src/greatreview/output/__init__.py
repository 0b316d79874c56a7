"""Renderers for parsed diffs: Rich terminal and JSON."""
