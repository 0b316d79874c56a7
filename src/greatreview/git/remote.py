"""Remote diff and repo info over ssh.

Remote targets look like ``[user@]host:path`` or ``ssh://[user@]host[:port]/path``.
ssh always runs with ``BatchMode=yes`` and a short ``ConnectTimeout`` so a
missing key or an unreachable host fails fast instead of prompting.
"""

from __future__ import annotations

import re
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from greatreview.git.errors import (
    CommandExecutionError,
    MalformedRemoteSpecError,
    NonZeroExitError,
    NotARepositoryError,
    RemoteConnectionError,
)
from greatreview.git.models import RepoInfo
from greatreview.git.repo_info import repo_name

DEFAULT_CONNECT_TIMEOUT = 5
DEFAULT_COMMAND_TIMEOUT = 60
# ssh reserves this exit status for its own failures (connect, auth, config).
_SSH_FAILURE_STATUS = 255

_URL_RE = re.compile(r"^ssh://(?P<host>[^/:]+(?:@[^/:]+)?)(?::(?P<port>[^/]*))?(?P<path>/.*)?$")


@dataclass(frozen=True)
class RemoteSpec:
    host: str  # may carry a user@ prefix
    path: str
    port: Optional[int] = None

    def __str__(self) -> str:
        if self.port is not None:
            return f"ssh://{self.host}:{self.port}{self.path}"
        return f"{self.host}:{self.path}"


def parse_remote_spec(text: str) -> RemoteSpec:
    """Split a remote target into host, path and optional port."""
    text = text.strip()
    if text.startswith("ssh://"):
        m = _URL_RE.match(text)
        if not m or not m.group("path") or m.group("path") == "/":
            raise MalformedRemoteSpecError(f"Invalid remote (expected ssh://host/path): {text!r}")
        port = m.group("port")
        if port is not None and not port.isdigit():
            raise MalformedRemoteSpecError(f"Invalid port in remote {text!r}")
        return RemoteSpec(host=m.group("host"), path=m.group("path"),
                          port=int(port) if port else None)

    host, sep, path = text.partition(":")
    if not sep or not host or not path or "/" in host:
        raise MalformedRemoteSpecError(f"Invalid remote (expected host:path): {text!r}")
    return RemoteSpec(host=host, path=path)


def _cd(path: str) -> str:
    """``cd`` into *path* on the remote, keeping a leading ``~`` expandable."""
    if path == "~":
        return "cd"
    if path.startswith("~/"):
        return f"cd ~/{shlex.quote(path[2:])}"
    return f"cd {shlex.quote(path)}"


def remote_diff_command(path: str, diff_range: Optional[str] = None) -> str:
    """Shell command run on the remote host to produce the diff."""
    if diff_range:
        return f"{_cd(path)} && git diff --no-color {shlex.quote(diff_range)}"
    return f"{_cd(path)} && (git diff --no-color HEAD 2>/dev/null || git diff --no-color)"


def remote_info_command(path: str) -> str:
    """One invocation that prints the repo root then the branch."""
    return (
        f"{_cd(path)} && git rev-parse --show-toplevel && "
        "(git rev-parse --abbrev-ref HEAD 2>/dev/null || git symbolic-ref --short HEAD)"
    )


def ssh_argv(
    spec: RemoteSpec,
    remote_command: str,
    *,
    ssh_command: str = "ssh",
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
) -> List[str]:
    argv = [
        *shlex.split(ssh_command),
        "-o", "BatchMode=yes",
        "-o", f"ConnectTimeout={connect_timeout}",
    ]
    if spec.port is not None:
        argv += ["-p", str(spec.port)]
    argv += [spec.host, remote_command]
    return argv


def _run_ssh(
    spec: RemoteSpec,
    remote_command: str,
    *,
    ssh_command: str,
    connect_timeout: int,
    timeout: int,
) -> str:
    argv = ssh_argv(spec, remote_command, ssh_command=ssh_command, connect_timeout=connect_timeout)
    logger.debug("Running on {host}: {command}", host=spec.host, command=remote_command)
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError as exc:
        raise CommandExecutionError(f"ssh client not found: {argv[0]}") from exc
    except subprocess.TimeoutExpired as exc:
        raise RemoteConnectionError(f"ssh to {spec.host} timed out after {timeout}s") from exc
    except OSError as exc:
        raise CommandExecutionError(f"Failed to execute ssh: {exc}") from exc

    stderr = result.stderr.strip()
    if result.returncode == _SSH_FAILURE_STATUS:
        raise RemoteConnectionError(f"Failed to connect to {spec.host}: {stderr}")
    if result.returncode != 0:
        raise NonZeroExitError(f"ssh {spec.host}", result.returncode, stderr)
    return result.stdout


def run_remote_git_diff(
    remote: str,
    diff_range: Optional[str] = None,
    *,
    ssh_command: str = "ssh",
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    timeout: int = DEFAULT_COMMAND_TIMEOUT,
) -> str:
    """Return the unified diff produced by git on the remote host."""
    spec = parse_remote_spec(remote)
    return _run_ssh(
        spec,
        remote_diff_command(spec.path, diff_range),
        ssh_command=ssh_command,
        connect_timeout=connect_timeout,
        timeout=timeout,
    )


def get_remote_repo_info(
    remote: str,
    *,
    ssh_command: str = "ssh",
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    timeout: int = DEFAULT_COMMAND_TIMEOUT,
) -> RepoInfo:
    """Resolve root, name and branch of the remote repository in one ssh call."""
    spec = parse_remote_spec(remote)
    try:
        out = _run_ssh(
            spec,
            remote_info_command(spec.path),
            ssh_command=ssh_command,
            connect_timeout=connect_timeout,
            timeout=timeout,
        )
    except NonZeroExitError as exc:
        raise NotARepositoryError(f"Not a git repository on {spec.host}: {exc.stderr}") from exc

    lines = [line.strip() for line in out.splitlines() if line.strip()]
    if len(lines) < 2:
        raise NotARepositoryError(f"Unexpected repository info from {spec.host}: {out.strip()!r}")
    root, branch = lines[0], lines[1]
    return RepoInfo(name=repo_name(root), branch=branch, path=root)
