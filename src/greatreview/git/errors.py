"""Errors raised while sourcing diffs and repository metadata.

Each error carries a single human-readable message. Parsing has no error
type: malformed diff text degrades, it does not fail.
"""

from __future__ import annotations


class GitError(Exception):
    """Base class for every git / ssh sourcing failure."""


class CommandExecutionError(GitError):
    """The git or ssh process could not be spawned (or timed out locally)."""


class NonZeroExitError(GitError):
    """The tool ran but reported failure; ``stderr`` holds its diagnostics."""

    def __init__(self, command: str, returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr or "no diagnostic output"
        super().__init__(f"{command} exited with status {returncode}: {detail}")


class NotARepositoryError(GitError):
    """Root or branch resolution failed for the target path."""


class RemoteConnectionError(GitError):
    """ssh could not connect or authenticate within the time bound."""


class MalformedRemoteSpecError(GitError):
    """The remote target could not be split into host and path."""
