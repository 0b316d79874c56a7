"""JSON reporter — parsed diff model for scripts and UIs.

Enum values are emitted as their tagged strings (``"Added"``,
``"Addition"``, ...) and absent optionals as ``null``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from greatreview.git.models import DiffFile, DiffHunk, DiffLine, RepoInfo


def line_to_dict(line: DiffLine) -> Dict[str, Any]:
    return {
        "content": line.content,
        "line_type": line.line_type.value,
        "old_line_no": line.old_line_no,
        "new_line_no": line.new_line_no,
    }


def hunk_to_dict(hunk: DiffHunk) -> Dict[str, Any]:
    return {
        "header": hunk.header,
        "old_start": hunk.old_start,
        "old_count": hunk.old_count,
        "new_start": hunk.new_start,
        "new_count": hunk.new_count,
        "lines": [line_to_dict(line) for line in hunk.lines],
    }


def file_to_dict(diff_file: DiffFile) -> Dict[str, Any]:
    return {
        "path": diff_file.path,
        "old_path": diff_file.old_path,
        "status": diff_file.status.value,
        "hunks": [hunk_to_dict(h) for h in diff_file.hunks],
    }


def to_dict(files: List[DiffFile]) -> List[Dict[str, Any]]:
    """Convert parsed files to a JSON-serialisable list."""
    return [file_to_dict(f) for f in files]


def repo_info_to_dict(info: RepoInfo) -> Dict[str, Any]:
    return {"name": info.name, "branch": info.branch, "path": info.path}


def render(files: List[DiffFile], repo_info: Optional[RepoInfo] = None) -> str:
    """Return formatted JSON: the file list, wrapped with repo info when given."""
    if repo_info is None:
        return json.dumps(to_dict(files), indent=2)
    return json.dumps({"repo": repo_info_to_dict(repo_info), "files": to_dict(files)}, indent=2)


def render_repo_info(info: RepoInfo) -> str:
    return json.dumps(repo_info_to_dict(info), indent=2)
