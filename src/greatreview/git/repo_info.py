"""Repository introspection — root, display name, current branch."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Union

from greatreview.git.adapter import DEFAULT_TIMEOUT, _run_git
from greatreview.git.errors import NonZeroExitError, NotARepositoryError
from greatreview.git.models import RepoInfo


def repo_name(root: str) -> str:
    """Last path segment of *root*, or *root* itself when it has none."""
    name = PurePosixPath(root.replace("\\", "/")).name
    return name or root


def _current_branch(repo_path: Path, timeout: int) -> str:
    try:
        out = _run_git(["-C", str(repo_path), "rev-parse", "--abbrev-ref", "HEAD"],
                       cwd=repo_path, timeout=timeout)
    except NonZeroExitError:
        # No commits yet: HEAD is unborn but still names a branch.
        try:
            out = _run_git(["-C", str(repo_path), "symbolic-ref", "--short", "HEAD"],
                           cwd=repo_path, timeout=timeout)
        except NonZeroExitError as exc:
            raise NotARepositoryError(f"Failed to get current branch: {exc.stderr}") from exc
    return out.strip()


def get_repo_info(repo_path: Union[str, Path], timeout: int = DEFAULT_TIMEOUT) -> RepoInfo:
    """Resolve root path, display name and branch for the repo at *repo_path*."""
    repo_path = Path(repo_path)
    try:
        out = _run_git(["-C", str(repo_path), "rev-parse", "--show-toplevel"],
                       cwd=repo_path, timeout=timeout)
    except NonZeroExitError as exc:
        raise NotARepositoryError(f"Not a git repository: {exc.stderr}") from exc

    root = out.strip()
    return RepoInfo(name=repo_name(root), branch=_current_branch(repo_path, timeout), path=root)
