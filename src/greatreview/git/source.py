"""Pick local or remote sourcing, then parse.

Both entry points block until git (or ssh) returns; callers driving an
interactive surface should run them off their UI thread.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger

from greatreview.config.schema import GreatReviewConfig
from greatreview.git.adapter import find_repo_root, run_git_diff
from greatreview.git.diff_parser import parse_unified_diff
from greatreview.git.models import DiffFile, RepoInfo
from greatreview.git.remote import get_remote_repo_info, run_remote_git_diff
from greatreview.git.repo_info import get_repo_info


def fetch_diff_text(
    diff_range: Optional[str] = None,
    remote: Optional[str] = None,
    config: Optional[GreatReviewConfig] = None,
    cwd: Optional[Path] = None,
) -> str:
    """Raw unified diff text for *diff_range*, locally or on *remote*."""
    cfg = config or GreatReviewConfig()
    diff_range = diff_range or cfg.diff.default_range
    remote = remote or cfg.remote.default

    if remote:
        if cfg.diff.context_lines is not None:
            logger.debug("diff.context_lines is not applied to remote diffs")
        return run_remote_git_diff(
            remote,
            diff_range,
            ssh_command=cfg.remote.ssh_command,
            connect_timeout=cfg.remote.connect_timeout,
            timeout=cfg.remote.command_timeout,
        )

    repo_root = find_repo_root(cwd, timeout=cfg.git.timeout)
    return run_git_diff(
        diff_range,
        repo_root,
        context_lines=cfg.diff.context_lines,
        timeout=cfg.git.timeout,
    )


def load_diff(
    diff_range: Optional[str] = None,
    remote: Optional[str] = None,
    config: Optional[GreatReviewConfig] = None,
    cwd: Optional[Path] = None,
) -> List[DiffFile]:
    """Fetch the diff and return it parsed. No range and no remote = working tree vs HEAD."""
    text = fetch_diff_text(diff_range, remote, config, cwd)
    files = parse_unified_diff(text)
    logger.debug("Parsed {count} file(s) from {size} bytes of diff", count=len(files), size=len(text))
    return files


def load_repo_info(
    remote: Optional[str] = None,
    config: Optional[GreatReviewConfig] = None,
    cwd: Optional[Path] = None,
) -> RepoInfo:
    """Repository root, name and branch, locally or on *remote*."""
    cfg = config or GreatReviewConfig()
    remote = remote or cfg.remote.default
    if remote:
        return get_remote_repo_info(
            remote,
            ssh_command=cfg.remote.ssh_command,
            connect_timeout=cfg.remote.connect_timeout,
            timeout=cfg.remote.command_timeout,
        )
    repo_root = find_repo_root(cwd, timeout=cfg.git.timeout)
    return get_repo_info(repo_root, timeout=cfg.git.timeout)
