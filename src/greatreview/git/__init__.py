"""Git interface layer — local and remote sourcing, diff parsing, models."""

from greatreview.git.adapter import find_repo_root, run_git_diff
from greatreview.git.diff_parser import DiffParser, parse_unified_diff
from greatreview.git.errors import (
    CommandExecutionError,
    GitError,
    MalformedRemoteSpecError,
    NonZeroExitError,
    NotARepositoryError,
    RemoteConnectionError,
)
from greatreview.git.models import DiffFile, DiffHunk, DiffLine, FileStatus, LineType, RepoInfo
from greatreview.git.remote import get_remote_repo_info, parse_remote_spec, run_remote_git_diff
from greatreview.git.repo_info import get_repo_info
from greatreview.git.source import load_diff, load_repo_info

__all__ = [
    "CommandExecutionError",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParser",
    "FileStatus",
    "GitError",
    "LineType",
    "MalformedRemoteSpecError",
    "NonZeroExitError",
    "NotARepositoryError",
    "RemoteConnectionError",
    "RepoInfo",
    "find_repo_root",
    "get_remote_repo_info",
    "get_repo_info",
    "load_diff",
    "load_repo_info",
    "parse_remote_spec",
    "parse_unified_diff",
    "run_git_diff",
    "run_remote_git_diff",
]
