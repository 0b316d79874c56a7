"""Shared test fixtures — sample diffs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


def _init_repo(path: Path) -> Path:
    subprocess.run(["git", "init", str(path)], capture_output=True, check=True)
    _git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(path, "config", "user.email", "test@test.com")
    _git(path, "config", "user.name", "Test")
    _git(path, "config", "commit.gpgsign", "false")
    return path


@pytest.fixture
def sample_diff_new_file() -> str:
    """A single new three-line file."""
    return textwrap.dedent("""\
        diff --git a/hello.txt b/hello.txt
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.txt
        @@ -0,0 +1,3 @@
        +line one
        +line two
        +line three
    """)


@pytest.fixture
def sample_diff_deleted_file() -> str:
    return textwrap.dedent("""\
        diff --git a/old.txt b/old.txt
        deleted file mode 100644
        index abc1234..0000000
        --- a/old.txt
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -first line
        -second line
        -third line
    """)


@pytest.fixture
def sample_diff_modified() -> str:
    """A modification mixing context, deletions and additions."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -10,4 +10,5 @@ def main():
             setup()
        -    run(debug=True)
        +    run(debug=False)
        +    report()
             teardown()
             return 0
    """)


@pytest.fixture
def sample_diff_two_files() -> str:
    """Two independent single-hunk files."""
    return textwrap.dedent("""\
        diff --git a/a.py b/a.py
        index 1111111..2222222 100644
        --- a/a.py
        +++ b/a.py
        @@ -3,2 +3,2 @@
         keep
        -old a
        +new a
        diff --git a/b.py b/b.py
        index 3333333..4444444 100644
        --- a/b.py
        +++ b/b.py
        @@ -40,2 +41,3 @@
         keep b
        +added b
         tail b
    """)


@pytest.fixture
def sample_diff_two_hunks() -> str:
    """One file with hunks anchored at old lines 1 and 20."""
    return textwrap.dedent("""\
        diff --git a/f.py b/f.py
        index abc..def 100644
        --- a/f.py
        +++ b/f.py
        @@ -1,3 +1,4 @@
         import os
        +import sys
         import re
         x = 1
        @@ -20,3 +21,2 @@ def f():
             a = 1
        -    b = 2
             return a
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        index 0000000..abc1234
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A pure rename with no content change."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 100%
        rename from old_name.py
        rename to new_name.py
    """)


@pytest.fixture
def sample_diff_rename_with_edit() -> str:
    return textwrap.dedent("""\
        diff --git a/src/old.py b/src/new.py
        similarity index 90%
        rename from src/old.py
        rename to src/new.py
        index abc1234..def5678 100644
        --- a/src/old.py
        +++ b/src/new.py
        @@ -1,2 +1,2 @@
        -name = "old"
        +name = "new"
         value = 1
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """Last line changes only by gaining a trailing newline."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        index abc1234..def5678 100644
        --- a/data.txt
        +++ b/data.txt
        @@ -1,2 +1,3 @@
         first
        -last
        \\ No newline at end of file
        +last
        +extra
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """A temporary git repository with one commit of README.md."""
    repo = _init_repo(tmp_path / "repo")
    (repo / "README.md").write_text("# Test\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")
    return repo


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """A temporary git repository with no commits."""
    return _init_repo(tmp_path / "fresh")
