"""Git subprocess wrapper — working-tree diff, repository root."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional

from loguru import logger

from greatreview.git.errors import (
    CommandExecutionError,
    NonZeroExitError,
    NotARepositoryError,
)

DEFAULT_TIMEOUT = 30


def _run_git(args: List[str], cwd: Path, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run a git command and return stdout. Raises GitError subclasses on failure."""
    command = f"git {' '.join(args)}"
    logger.debug("Running {command} in {cwd}", command=command, cwd=cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise CommandExecutionError("git is not installed or not on PATH") from exc
    except NotADirectoryError as exc:
        raise CommandExecutionError(f"Not a directory: {cwd}") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandExecutionError(f"git command timed out after {timeout}s: {command}") from exc
    except OSError as exc:
        raise CommandExecutionError(f"Failed to execute {command}: {exc}") from exc

    if result.returncode != 0:
        raise NonZeroExitError(command, result.returncode, result.stderr.strip())
    return result.stdout


def diff_args(diff_range: Optional[str] = None, context_lines: Optional[int] = None) -> List[str]:
    """Arguments for ``git diff`` against *diff_range*, or HEAD when absent."""
    args = ["diff", "--no-color"]
    if context_lines is not None:
        args.append(f"--unified={context_lines}")
    args.append(diff_range or "HEAD")
    return args


def run_git_diff(
    diff_range: Optional[str],
    repo_path: Path,
    *,
    context_lines: Optional[int] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Return the unified diff for *diff_range* inside *repo_path*.

    Without a range the working tree is diffed against HEAD. In a repository
    with no commits HEAD does not resolve, so that case falls back to a plain
    ``git diff``; if the fallback fails too, its error is the one raised.
    """
    if diff_range:
        return _run_git(diff_args(diff_range, context_lines), cwd=repo_path, timeout=timeout)

    try:
        return _run_git(diff_args(None, context_lines), cwd=repo_path, timeout=timeout)
    except NonZeroExitError as exc:
        logger.info("git diff HEAD failed ({err}); falling back to git diff", err=exc.stderr)

    fallback = diff_args(None, context_lines)[:-1]
    return _run_git(fallback, cwd=repo_path, timeout=timeout)


def find_repo_root(cwd: Optional[Path] = None, timeout: int = DEFAULT_TIMEOUT) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    try:
        out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd, timeout=timeout)
    except NonZeroExitError as exc:
        raise NotARepositoryError(f"Not inside a git repository: {exc.stderr}") from exc
    return Path(out.strip())
